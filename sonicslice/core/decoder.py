"""
Decoders that turn encoded audio into SampleBuffers.
"""
from __future__ import annotations
import io
import os
import numpy as np
import soundfile as sf

from .buffer import SampleBuffer
from .exceptions import DecodeError, InvalidBufferShape
from sonicslice.utils.logger import logger


class SoundFileDecoder:
    """
    Decodes in-memory audio with soundfile (WAV, FLAC, OGG and, with a recent
    libsndfile, MP3). Files on disk go through librosa, which also handles
    formats libsndfile cannot read.
    """

    def decode(self, data: bytes) -> SampleBuffer:
        """
        Decode raw file bytes.

        Raises:
            DecodeError: If the bytes are not a readable audio file
        """
        try:
            samples, samplerate = sf.read(io.BytesIO(data), dtype='float32', always_2d=True)
        except (sf.LibsndfileError, RuntimeError, TypeError, ValueError) as e:
            raise DecodeError("Could not decode audio data", {"bytes": len(data)}) from e
        # soundfile returns (frames, channels)
        return _to_buffer(samples.T, samplerate, source=f"<{len(data)} bytes>")

    def decode_file(self, file_path: str | os.PathLike) -> SampleBuffer:
        """Load a file from disk at its native sample rate, keeping all channels."""
        import librosa

        logger.info(f"Decoding file: {file_path}")
        try:
            samples, samplerate = librosa.load(file_path, sr=None, mono=False)
        except Exception as e:
            raise DecodeError("Could not decode audio file", {"path": str(file_path)}) from e
        return _to_buffer(samples, samplerate, source=str(file_path))


def _to_buffer(samples: np.ndarray, samplerate: int, source: str) -> SampleBuffer:
    try:
        return SampleBuffer.from_array(samples, int(samplerate))
    except InvalidBufferShape as e:
        raise DecodeError("Decoded audio is empty", {"source": source, **e.context}) from e
