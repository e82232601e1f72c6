"""
Tests for the 16-bit PCM WAV encoder.
Round trips are checked with soundfile and scipy as independent readers.
"""
import io
import struct

import pytest
import numpy as np
import soundfile as sf
from scipy.io import wavfile

from sonicslice.core.buffer import SampleBuffer
from sonicslice.core.transforms import join_buffers, slice_buffer
from sonicslice.core.wav import encode_wav, float_to_pcm16, wav_header

from conftest import make_sine_buffer

QUANT_TOL = 1 / 32767 + 1e-9


def pcm_to_float(pcm: np.ndarray) -> np.ndarray:
    """Inverse of the asymmetric scaling used by the encoder."""
    pcm = pcm.astype(np.float64)
    return np.where(pcm < 0, pcm / 32768.0, pcm / 32767.0)


class TestHeader:

    def test_layout(self):
        header = wav_header(channels=2, samplerate=44100, frames=10)
        fields = struct.unpack('<4sI4s4sIHHIIHH4sI', header)
        assert len(header) == 44
        assert fields[0] == b'RIFF'
        assert fields[1] == 36 + 40
        assert fields[2] == b'WAVE'
        assert fields[3] == b'fmt '
        assert fields[4] == 16
        assert fields[5] == 1
        assert fields[6] == 2
        assert fields[7] == 44100
        assert fields[8] == 44100 * 4
        assert fields[9] == 4
        assert fields[10] == 16
        assert fields[11] == b'data'
        assert fields[12] == 40

    def test_total_size(self, stereo_buffer):
        data = encode_wav(stereo_buffer)
        assert len(data) == 44 + stereo_buffer.frames * 2 * 2


class TestSampleConversion:

    def test_asymmetric_scaling(self):
        pcm = float_to_pcm16(np.array([1.0, -1.0, 0.0, 0.5, -0.5]))
        assert list(pcm) == [32767, -32768, 0, 16383, -16384]

    def test_clamps_out_of_range(self):
        pcm = float_to_pcm16(np.array([2.5, -7.0]))
        assert list(pcm) == [32767, -32768]

    def test_truncates_toward_zero(self):
        # 0.00005 * 32767 = 1.64 -> 1 ; -0.00005 * 32768 = -1.64 -> -1
        pcm = float_to_pcm16(np.array([0.00005, -0.00005]))
        assert list(pcm) == [1, -1]

    def test_nan_encodes_as_zero(self):
        assert list(float_to_pcm16(np.array([np.nan]))) == [0]

    def test_interleaving(self):
        buf = SampleBuffer.from_array(np.array([[1.0, 0.0], [-1.0, 0.5]]), 8000)
        body = encode_wav(buf)[44:]
        assert struct.unpack('<4h', body) == (32767, -32768, 0, 16383)

    def test_little_endian(self):
        buf = SampleBuffer.from_array(np.array([1.0]), 8000)
        assert encode_wav(buf)[44:] == b'\xff\x7f'


class TestRoundTrip:

    @pytest.mark.parametrize("channels", [1, 2, 3, 8])
    @pytest.mark.parametrize("sr", [8000, 44100, 48000])
    def test_soundfile_round_trip(self, channels, sr):
        buf = make_sine_buffer(0.05, channels=channels, sr=sr)
        pcm, rate = sf.read(io.BytesIO(encode_wav(buf)), dtype='int16', always_2d=True)
        assert rate == sr
        assert pcm.shape == (buf.frames, channels)
        assert np.allclose(pcm_to_float(pcm.T), buf.data, atol=QUANT_TOL, rtol=0)

    def test_scipy_reads_same_samples(self, stereo_buffer):
        rate, pcm = wavfile.read(io.BytesIO(encode_wav(stereo_buffer)))
        assert rate == stereo_buffer.samplerate
        assert pcm.dtype == np.int16
        assert np.array_equal(pcm.T, float_to_pcm16(stereo_buffer.data))

    def test_cut_ten_seconds_of_twenty(self):
        source = make_sine_buffer(20.0, channels=2, sr=44100)
        clip = slice_buffer(source, 0.0, 10.0)
        info = sf.info(io.BytesIO(encode_wav(clip)))
        assert info.samplerate == 44100
        assert info.channels == 2
        assert abs(info.frames - 10 * 44100) <= 1
        assert info.duration == pytest.approx(10.0, abs=1 / 44100)

    def test_join_three_and_four_seconds(self):
        a = make_sine_buffer(3.0, channels=1, sr=48000)
        b = make_sine_buffer(4.0, channels=1, sr=48000)
        data, rate = sf.read(io.BytesIO(encode_wav(join_buffers([a, b]))))
        assert rate == 48000
        assert abs(len(data) - 7 * 48000) <= 1
