"""
Pytest configuration and fixtures for SonicSlice tests.
"""
import pytest
import numpy as np

from sonicslice.core.audio_engine import AudioEngine
from sonicslice.core.buffer import SampleBuffer
from sonicslice.core.config import AUDIO_CONFIG
from sonicslice.core.exceptions import DecodeError
from sonicslice.core.playback import PlaybackController


def make_sine_buffer(seconds: float, channels: int = 2, sr: int = AUDIO_CONFIG.default_samplerate) -> SampleBuffer:
    """Sine buffer with a different frequency per channel."""
    frames = int(round(seconds * sr))
    t = np.arange(frames, dtype=np.float64) / sr
    data = np.stack([0.8 * np.sin(2 * np.pi * 220 * (ch + 1) * t) for ch in range(channels)])
    return SampleBuffer.from_array(data.astype(np.float32), sr)


class FakeClock:
    """Clock the test moves by hand."""

    def __init__(self, start: float = 100.0):
        self.time = start

    def now(self) -> float:
        return self.time

    def advance(self, seconds: float) -> None:
        self.time += seconds


class ManualTask:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Collects scheduled tasks; tick() runs the live ones once."""

    def __init__(self):
        self.tasks = []

    def schedule(self, callback, interval):
        task = ManualTask(callback)
        self.tasks.append(task)
        return task

    @property
    def active(self):
        return [t for t in self.tasks if not t.cancelled]

    def tick(self):
        for task in list(self.tasks):
            if not task.cancelled:
                task.callback()


class FakeSession:
    def __init__(self, offset, duration, on_finished):
        self.offset = offset
        self.duration = duration
        self.on_finished = on_finished
        self.stopped = False

    def stop(self):
        self.stopped = True


class FakeOutput:
    """Records every emission request instead of playing audio."""

    def __init__(self):
        self.sessions = []

    def start(self, buffer, offset, duration, on_finished):
        session = FakeSession(offset, duration, on_finished)
        self.sessions.append(session)
        return session

    @property
    def last(self):
        return self.sessions[-1]


class FakeDecoder:
    """Maps known byte strings to buffers; anything else is malformed."""

    def __init__(self, files=None):
        self.files = dict(files or {})

    def decode(self, data):
        if data not in self.files:
            raise DecodeError("Malformed input", {"bytes": len(data)})
        return self.files[data]


class FakeNamer:
    def __init__(self, reply=None):
        self.reply = reply
        self.descriptions = []

    def suggest(self, description):
        self.descriptions.append(description)
        return self.reply


@pytest.fixture
def mono_buffer() -> SampleBuffer:
    """1 second of mono sine at 44.1 kHz."""
    return make_sine_buffer(1.0, channels=1)


@pytest.fixture
def stereo_buffer() -> SampleBuffer:
    """1 second of stereo sine at 44.1 kHz."""
    return make_sine_buffer(1.0, channels=2)


@pytest.fixture
def long_buffer() -> SampleBuffer:
    """20 seconds of stereo audio at 8 kHz."""
    return make_sine_buffer(20.0, channels=2, sr=8000)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def output() -> FakeOutput:
    return FakeOutput()


@pytest.fixture
def controller(clock, output, scheduler) -> PlaybackController:
    return PlaybackController(clock, output, scheduler)


@pytest.fixture
def decoder(long_buffer) -> FakeDecoder:
    return FakeDecoder({b"song": long_buffer, b"short": make_sine_buffer(3.0, channels=1, sr=8000)})


@pytest.fixture
def engine(decoder, output, clock, scheduler) -> AudioEngine:
    return AudioEngine(decoder=decoder, output=output, clock=clock, scheduler=scheduler)
