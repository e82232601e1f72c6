"""
Buffer transforms for SonicSlice.
All functions are pure: they never modify their inputs and always return a
new SampleBuffer.
"""
from __future__ import annotations
import logging
import math
from typing import Iterable

from .buffer import SampleBuffer
from .config import AUDIO_CONFIG

logger = logging.getLogger("SonicSlice")


def seconds_to_frame(seconds: float, samplerate: int) -> int:
    """Frame index at a time position, rounded down."""
    return math.floor(seconds * samplerate)


def slice_buffer(buffer: SampleBuffer, start: float, end: float) -> SampleBuffer:
    """
    Copy the frames between two time positions into a new buffer.

    Args:
        buffer: Source audio
        start: Start of the range in seconds (inclusive)
        end: End of the range in seconds (exclusive)

    Returns:
        Buffer holding frames [floor(start*sr), floor(end*sr)). Frames outside
        the source read as silence. An empty or inverted range yields a
        1-frame silent buffer with the source's channel count.
    """
    sr = buffer.samplerate
    start_frame = seconds_to_frame(start, sr)
    end_frame = seconds_to_frame(end, sr)
    frame_count = end_frame - start_frame

    if frame_count <= 0:
        logger.debug("Empty slice %.3f-%.3fs, returning 1 silent frame", start, end)
        return SampleBuffer.silence(buffer.channels, AUDIO_CONFIG.fallback_frames, sr)

    result = SampleBuffer(buffer.channels, frame_count, sr)

    # Intersection of the requested range with the source data
    src_start = max(0, start_frame)
    src_end = min(buffer.frames, end_frame)
    if src_end > src_start:
        source = buffer.data[:, src_start:src_end]
        for ch in range(buffer.channels):
            result.copy_to_channel(source[ch], ch, start_frame=src_start - start_frame)

    return result


def join_buffers(buffers: Iterable[SampleBuffer]) -> SampleBuffer:
    """
    Concatenate buffers back to back.

    The output has the largest channel count of the inputs and the sample
    rate of the first input; nothing is resampled. Inputs with fewer channels
    feed their channel 0 into the missing output channels.

    Args:
        buffers: Buffers in playback order

    Returns:
        Joined buffer, or a 1-frame mono silent buffer at the default rate
        when there is nothing to join
    """
    buffers = list(buffers)
    if not buffers:
        return SampleBuffer.silence(
            AUDIO_CONFIG.fallback_channels,
            AUDIO_CONFIG.fallback_frames,
            AUDIO_CONFIG.default_samplerate,
        )

    channels = max(b.channels for b in buffers)
    total_frames = sum(b.frames for b in buffers)
    samplerate = buffers[0].samplerate

    rates = {b.samplerate for b in buffers}
    if len(rates) > 1:
        logger.warning(
            "Joining buffers with mixed sample rates %s; output uses %d Hz without resampling",
            sorted(rates), samplerate
        )

    result = SampleBuffer(channels, total_frames, samplerate)
    offset = 0
    for buffer in buffers:
        for ch in range(channels):
            source_ch = ch if ch < buffer.channels else 0
            result.copy_to_channel(buffer.get_channel_data(source_ch), ch, start_frame=offset)
        offset += buffer.frames

    logger.debug("Joined %d buffers into %r", len(buffers), result)
    return result
