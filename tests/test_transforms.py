"""
Tests for slice and join.
"""
import pytest
import numpy as np

from sonicslice.core.buffer import SampleBuffer
from sonicslice.core.transforms import join_buffers, seconds_to_frame, slice_buffer

from conftest import make_sine_buffer


class TestSlice:

    @pytest.mark.parametrize("start,end", [
        (0.0, 10.0), (1.25, 1.35), (3.3333, 7.7777), (0.0, 20.0), (19.9, 20.0),
    ])
    def test_frame_count(self, long_buffer, start, end):
        sliced = slice_buffer(long_buffer, start, end)
        expected = round((end - start) * long_buffer.samplerate)
        assert abs(sliced.frames - expected) <= 1

    def test_keeps_rate_and_channels(self, long_buffer):
        sliced = slice_buffer(long_buffer, 2.0, 5.0)
        assert sliced.samplerate == long_buffer.samplerate
        assert sliced.channels == long_buffer.channels

    def test_copies_samples_verbatim(self, long_buffer):
        sliced = slice_buffer(long_buffer, 2.5, 3.0)
        sr = long_buffer.samplerate
        start = seconds_to_frame(2.5, sr)
        assert np.array_equal(sliced.data, long_buffer.data[:, start:start + sliced.frames])

    def test_floor_rounding(self):
        buf = SampleBuffer.from_array(np.arange(10, dtype=np.float32), 10)
        sliced = slice_buffer(buf, 0.19, 0.51)  # frames 1..5
        assert list(sliced.data[0]) == [1.0, 2.0, 3.0, 4.0]

    def test_does_not_alias_source(self, long_buffer):
        sliced = slice_buffer(long_buffer, 0.0, 1.0)
        sliced.get_channel_data(0)[:] = 0.0
        assert not np.allclose(long_buffer.data[0, :8000], 0.0)

    def test_zero_width_returns_one_silent_frame(self, long_buffer):
        sliced = slice_buffer(long_buffer, 4.0, 4.0)
        assert sliced.frames == 1
        assert sliced.channels == long_buffer.channels
        assert sliced.samplerate == long_buffer.samplerate
        assert np.all(sliced.data == 0.0)

    def test_inverted_range_returns_one_silent_frame(self, long_buffer):
        assert slice_buffer(long_buffer, 5.0, 2.0).frames == 1

    def test_past_end_reads_silence(self):
        buf = SampleBuffer.from_array(np.ones(10, dtype=np.float32), 10)
        sliced = slice_buffer(buf, 0.5, 1.5)
        assert sliced.frames == 10
        assert list(sliced.data[0]) == [1.0] * 5 + [0.0] * 5


class TestJoin:

    def test_frame_and_channel_counts(self):
        a = make_sine_buffer(0.5, channels=1, sr=8000)
        b = make_sine_buffer(0.25, channels=2, sr=8000)
        joined = join_buffers([a, b])
        assert joined.frames == a.frames + b.frames
        assert joined.channels == 2
        assert joined.samplerate == 8000

    def test_singleton_join_is_identity(self, long_buffer):
        sliced = slice_buffer(long_buffer, 1.0, 2.5)
        joined = join_buffers([sliced])
        assert joined.channels == sliced.channels
        assert np.array_equal(joined.data, sliced.data)

    def test_order_and_placement(self):
        a = SampleBuffer.from_array(np.full(3, 0.1, dtype=np.float32), 10)
        b = SampleBuffer.from_array(np.full(2, 0.2, dtype=np.float32), 10)
        joined = join_buffers([a, b, a])
        assert np.allclose(joined.data[0], [0.1, 0.1, 0.1, 0.2, 0.2, 0.1, 0.1, 0.1])

    def test_mono_duplicated_into_all_channels(self):
        mono = SampleBuffer.from_array(np.full(4, 0.5, dtype=np.float32), 10)
        stereo = SampleBuffer.from_array(np.stack([np.full(2, 0.1), np.full(2, -0.1)]), 10)
        joined = join_buffers([mono, stereo])
        assert np.allclose(joined.data[0], [0.5] * 4 + [0.1] * 2)
        assert np.allclose(joined.data[1], [0.5] * 4 + [-0.1] * 2)

    def test_mixed_rates_use_first(self):
        a = SampleBuffer(1, 100, 8000)
        b = SampleBuffer(1, 100, 44100)
        joined = join_buffers([a, b])
        assert joined.samplerate == 8000
        assert joined.frames == 200

    def test_empty_join_fallback(self):
        joined = join_buffers([])
        assert joined.frames == 1
        assert joined.channels == 1
        assert joined.samplerate == 44100
        assert joined.data[0, 0] == 0.0

    def test_inputs_untouched(self):
        a = make_sine_buffer(0.1, channels=1, sr=8000)
        before = a.data.copy()
        join_buffers([a, a])
        assert np.array_equal(a.data, before)

    def test_three_plus_four_seconds(self):
        a = make_sine_buffer(3.0, channels=2, sr=44100)
        b = make_sine_buffer(4.0, channels=2, sr=44100)
        joined = join_buffers([a, b])
        assert joined.duration == pytest.approx(7.0, abs=1 / 44100)
