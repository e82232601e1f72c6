"""
SonicSlice Core Module

This module contains the audio editing engine:
- AudioEngine: Main orchestrator (load, select, play, cut, join)
- SampleBuffer: Multi-channel audio in memory
- compute_peaks: Waveform min/max reduction
- slice_buffer / join_buffers: Buffer transforms
- encode_wav: 16-bit PCM WAV encoding
- PlaybackController: Transport and cursor clock
- SelectionDragMachine: Pointer-driven selection editing
- ClipRegistry: Ordered clip collection
"""
from .audio_engine import AudioEngine
from .audio_file import AudioFile
from .buffer import SampleBuffer
from .clip import Clip, ExportArtifact
from .clip_registry import ClipRegistry
from .clock import MonotonicClock, RepeatingTask, ThreadScheduler
from .decoder import SoundFileDecoder
from .exceptions import DecodeError, InvalidBufferShape, SonicSliceError
from .naming import OpenAINameSuggester, fallback_clip_name
from .peaks import compute_peaks
from .playback import PlaybackController
from .selection import (
    DragMode,
    DragResult,
    PointerAction,
    PointerEvent,
    Selection,
    SelectionDragMachine,
)
from .transforms import join_buffers, slice_buffer
from .wav import encode_wav
from .config import (
    AUDIO_CONFIG,
    NAMING_CONFIG,
    PLAYBACK_CONFIG,
    SELECTION_CONFIG,
    WAVEFORM_CONFIG,
    PlaybackState
)

__all__ = [
    # Main classes
    'AudioEngine',
    'AudioFile',
    'SampleBuffer',
    'Clip',
    'ExportArtifact',
    'ClipRegistry',
    'PlaybackController',
    'SelectionDragMachine',
    'Selection',
    'DragMode',
    'DragResult',
    'PointerAction',
    'PointerEvent',
    # Collaborators
    'MonotonicClock',
    'RepeatingTask',
    'ThreadScheduler',
    'SoundFileDecoder',
    'OpenAINameSuggester',
    # Transforms
    'compute_peaks',
    'slice_buffer',
    'join_buffers',
    'encode_wav',
    'fallback_clip_name',
    # Errors
    'SonicSliceError',
    'InvalidBufferShape',
    'DecodeError',
    # Config
    'AUDIO_CONFIG',
    'NAMING_CONFIG',
    'PLAYBACK_CONFIG',
    'SELECTION_CONFIG',
    'WAVEFORM_CONFIG',
    'PlaybackState',
]
