"""
Waveform peak reduction.
Decimates a channel into one (min, max) pair per pixel column.
"""
from __future__ import annotations
import numpy as np

from .buffer import SampleBuffer
from .config import WAVEFORM_CONFIG
from .types import PeakArray


def column_step(frames: int, width: int) -> int:
    """Samples per pixel column: ceil(frames / width)."""
    return -(-frames // width)


def compute_peaks(
    buffer: SampleBuffer,
    width: int,
    channel: int = WAVEFORM_CONFIG.reference_channel,
) -> PeakArray:
    """
    Reduce a channel to per-column (min, max) pairs.

    Column ``i`` summarizes samples ``[i*step, (i+1)*step)``. Columns past the
    end of the data hold the last sample as both min and max.

    Args:
        buffer: Source audio
        width: Number of pixel columns (> 0)
        channel: Channel to reduce (channel 0 by default)

    Returns:
        Array of shape (width, 2): column 0 is min, column 1 is max
    """
    if width <= 0:
        raise ValueError(f"Peak width must be positive, got {width}")

    samples = buffer.get_channel_data(channel)
    step = column_step(len(samples), width)

    # Padding with the edge value fills empty windows with the last sample
    # and leaves the extremes of the final partial window unchanged.
    padded = np.pad(samples, (0, width * step - len(samples)), mode='edge')
    windows = padded.reshape(width, step)

    peaks = np.empty((width, 2), dtype=np.float32)
    peaks[:, 0] = windows.min(axis=1)
    peaks[:, 1] = windows.max(axis=1)
    return peaks
