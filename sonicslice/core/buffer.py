"""
In-memory multi-channel audio for SonicSlice.
Samples are stored planar, one row per channel, as float32.
"""
from __future__ import annotations
import numpy as np

from .exceptions import InvalidBufferShape
from .types import ChannelArray, PlanarArray


class SampleBuffer:
    """
    Fixed-size multi-channel audio at a known sample rate.

    Channel count, frame count and sample rate are fixed at construction.
    Sample values may be written through the channel accessors, but the
    shape never changes, so every channel always has the same length.
    """
    __slots__ = ('_data', '_samplerate')

    def __init__(self, channels: int, frames: int, samplerate: int) -> None:
        """
        Create a silent buffer.

        Args:
            channels: Number of channels (>= 1)
            frames: Samples per channel (>= 1)
            samplerate: Sample rate in Hz (> 0)

        Raises:
            InvalidBufferShape: If any dimension is impossible
        """
        _check_shape(channels, frames, samplerate)
        self._data: PlanarArray = np.zeros((int(channels), int(frames)), dtype=np.float32)
        self._samplerate = int(samplerate)

    @classmethod
    def from_array(cls, data: np.ndarray, samplerate: int) -> "SampleBuffer":
        """
        Build a buffer by copying planar (channels, frames) data.
        A 1-D array is treated as mono.
        """
        array = np.asarray(data, dtype=np.float32)
        if array.ndim == 1:
            array = array[np.newaxis, :]
        if array.ndim != 2:
            raise InvalidBufferShape(
                "Sample data must be 1-D or 2-D (channels, frames)",
                {"ndim": array.ndim},
            )
        channels, frames = array.shape
        buffer = cls(channels, frames, samplerate)
        buffer._data[:] = array
        return buffer

    @classmethod
    def silence(cls, channels: int, frames: int, samplerate: int) -> "SampleBuffer":
        return cls(channels, frames, samplerate)

    @property
    def channels(self) -> int:
        return self._data.shape[0]

    @property
    def frames(self) -> int:
        return self._data.shape[1]

    @property
    def samplerate(self) -> int:
        return self._samplerate

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frames / self._samplerate

    @property
    def data(self) -> PlanarArray:
        """Read-only planar view of all samples, shape (channels, frames)."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def get_channel_data(self, channel: int) -> ChannelArray:
        """Writable view of one channel's samples."""
        if not 0 <= channel < self.channels:
            raise IndexError(f"Channel {channel} out of range (0..{self.channels - 1})")
        return self._data[channel]

    def copy_to_channel(self, source: np.ndarray, channel: int, start_frame: int = 0) -> None:
        """
        Copy samples into a channel starting at ``start_frame``.
        Samples that would land past the end are dropped.
        """
        target = self.get_channel_data(channel)
        if start_frame >= self.frames:
            return
        values = np.asarray(source, dtype=np.float32)[: self.frames - start_frame]
        target[start_frame:start_frame + len(values)] = values

    def copy(self) -> "SampleBuffer":
        return SampleBuffer.from_array(self._data, self._samplerate)

    def __repr__(self) -> str:
        return (
            f"SampleBuffer(channels={self.channels}, frames={self.frames}, "
            f"samplerate={self._samplerate}, duration={self.duration:.2f}s)"
        )


def _check_shape(channels: int, frames: int, samplerate: int) -> None:
    if channels < 1 or frames < 1 or samplerate <= 0:
        raise InvalidBufferShape(
            "Cannot create a sample buffer with this shape",
            {"channels": channels, "frames": frames, "samplerate": samplerate},
        )
