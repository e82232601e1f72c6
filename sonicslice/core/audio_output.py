"""
Audio output via sounddevice.
Streams a range of a SampleBuffer to the default output device.
"""
from __future__ import annotations
import logging
from typing import Optional
import numpy as np

from .buffer import SampleBuffer
from .config import PLAYBACK_CONFIG
from .types import FinishedCallback

logger = logging.getLogger("SonicSlice")


class SoundDeviceSession:
    """One open output stream. stop() may be called any number of times."""
    __slots__ = ('_stream',)

    def __init__(self, stream) -> None:
        self._stream = stream

    def stop(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            stream.stop()
            stream.close()
        except Exception as e:
            logger.warning("Error stopping stream: %s", e)


class SoundDeviceOutput:
    """
    Plays buffer ranges through a sounddevice OutputStream.
    sounddevice is imported on first use so that loading, cutting and
    exporting work on machines without an audio device.
    """

    def __init__(
        self,
        channels: int = PLAYBACK_CONFIG.output_channels,
        blocksize: int = PLAYBACK_CONFIG.output_blocksize,
        device: Optional[int | str] = None,
    ) -> None:
        self.channels = channels
        self.blocksize = blocksize
        self.device = device

    def _frames_for(self, buffer: SampleBuffer, offset: float, duration: float) -> np.ndarray:
        """Requested range as (frames, output_channels), mono duplicated."""
        sr = buffer.samplerate
        start = max(0, int(offset * sr))
        end = min(buffer.frames, int((offset + duration) * sr))
        data = buffer.data[:, start:end]
        if data.shape[0] >= self.channels:
            out = data[: self.channels]
        else:
            out = np.vstack([data] + [data[:1]] * (self.channels - data.shape[0]))
        return np.ascontiguousarray(out.T, dtype=np.float32)

    def start(
        self,
        buffer: SampleBuffer,
        offset: float,
        duration: float,
        on_finished: FinishedCallback,
    ) -> SoundDeviceSession:
        """
        Start emitting ``duration`` seconds of ``buffer`` from ``offset``.

        Args:
            buffer: Audio to play
            offset: Start position in seconds
            duration: Seconds to play
            on_finished: Called once when the stream finishes or is stopped
        """
        import sounddevice as sd

        frames = self._frames_for(buffer, offset, duration)
        position = 0

        def playback_callback(outdata: np.ndarray, n: int, time: object, status: sd.CallbackFlags) -> None:
            """Real-time audio callback."""
            nonlocal position
            if status and status.output_underflow:
                logger.debug("Output underflow")
            chunk = frames[position:position + n]
            outdata.fill(0)
            outdata[:len(chunk)] = chunk
            position += len(chunk)
            if position >= len(frames):
                raise sd.CallbackStop()

        stream = sd.OutputStream(
            samplerate=buffer.samplerate,
            channels=self.channels,
            blocksize=self.blocksize,
            device=self.device,
            callback=playback_callback,
            finished_callback=on_finished,
        )
        stream.start()
        logger.debug("Output stream started: %d frames at %d Hz", len(frames), buffer.samplerate)
        return SoundDeviceSession(stream)
