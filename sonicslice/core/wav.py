"""
16-bit PCM WAV encoding.

Produces the canonical 44-byte RIFF/WAVE header followed by interleaved
little-endian int16 frames.
"""
from __future__ import annotations
import struct
import numpy as np

from .buffer import SampleBuffer
from .config import AUDIO_CONFIG

# RIFF size, fmt chunk, data chunk header
_HEADER = struct.Struct('<4sI4s4sIHHIIHH4sI')
_PCM_FORMAT = 1
_FMT_CHUNK_SIZE = 16


def wav_header(channels: int, samplerate: int, frames: int) -> bytes:
    """Header for ``frames`` frames of 16-bit PCM."""
    bytes_per_sample = AUDIO_CONFIG.pcm_bit_depth // 8
    block_align = channels * bytes_per_sample
    data_size = frames * block_align
    return _HEADER.pack(
        b'RIFF',
        AUDIO_CONFIG.wav_header_size - 8 + data_size,
        b'WAVE',
        b'fmt ',
        _FMT_CHUNK_SIZE,
        _PCM_FORMAT,
        channels,
        samplerate,
        samplerate * block_align,
        block_align,
        AUDIO_CONFIG.pcm_bit_depth,
        b'data',
        data_size,
    )


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """
    Convert float samples to int16.

    Samples are clamped to [-1, 1], scaled by 32767 when non-negative and
    32768 when negative, then truncated toward zero. NaN becomes 0.
    """
    values = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0)
    np.clip(values, -1.0, 1.0, out=values)
    scaled = np.where(
        values < 0,
        values * AUDIO_CONFIG.pcm_negative_scale,
        values * AUDIO_CONFIG.pcm_positive_scale,
    )
    return np.trunc(scaled).astype('<i2')


def encode_wav(buffer: SampleBuffer) -> bytes:
    """
    Serialize a buffer as a 16-bit PCM WAV file.

    Args:
        buffer: Audio to encode

    Returns:
        Header plus interleaved frames, ``44 + frames * channels * 2`` bytes
    """
    pcm = float_to_pcm16(buffer.data)
    # (channels, frames) -> frame-major interleaving
    interleaved = np.ascontiguousarray(pcm.T)
    return wav_header(buffer.channels, buffer.samplerate, buffer.frames) + interleaved.tobytes()
