"""
Centralized configuration for SonicSlice.
All magic numbers and default settings in one place.
"""
from dataclasses import dataclass
from enum import Enum, auto


class PlaybackState(Enum):
    """Playback state enumeration."""
    STOPPED = auto()
    PLAYING = auto()


@dataclass(frozen=True, slots=True)
class AudioConfig:
    """Sample buffer and PCM export settings."""
    default_samplerate: int = 44100
    fallback_channels: int = 1
    fallback_frames: int = 1
    pcm_bit_depth: int = 16
    pcm_positive_scale: float = 32767.0
    pcm_negative_scale: float = 32768.0
    wav_header_size: int = 44


@dataclass(frozen=True, slots=True)
class SelectionConfig:
    """Selection range and drag handle settings."""
    min_gap_seconds: float = 0.1
    initial_length_seconds: float = 15.0
    handle_tolerance_ratio: float = 0.05  # of the total duration
    handle_tolerance_pixels: float = 10.0


@dataclass(frozen=True, slots=True)
class PlaybackConfig:
    """Playback clock and audio output settings."""
    tick_interval: float = 1.0 / 60.0  # one tick per display frame
    output_blocksize: int = 1024
    output_channels: int = 2


@dataclass(frozen=True, slots=True)
class WaveformConfig:
    """Waveform visualization settings."""
    default_width: int = 800
    reference_channel: int = 0


@dataclass(frozen=True, slots=True)
class NamingConfig:
    """Clip naming assist settings."""
    model: str = "gpt-4o-mini"
    max_name_length: int = 25
    api_key_env: str = "OPENAI_API_KEY"
    fallback_prefix: str = "audio_clip"
    cut_infix: str = "_cut_"
    join_prefix: str = "Joined_Mix"
    export_extension: str = ".wav"


# Global config instances (immutable singletons)
AUDIO_CONFIG = AudioConfig()
SELECTION_CONFIG = SelectionConfig()
PLAYBACK_CONFIG = PlaybackConfig()
WAVEFORM_CONFIG = WaveformConfig()
NAMING_CONFIG = NamingConfig()
