"""
Type definitions for the SonicSlice core module.
Provides type aliases and the protocols of the collaborators injected into
the engine (decoder, clock, scheduler, audio output, naming assist).
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Callable, Optional, Protocol, runtime_checkable
import os
import numpy as np
from numpy.typing import NDArray

from .config import PlaybackState

if TYPE_CHECKING:
    from .buffer import SampleBuffer

# Audio data types
ChannelArray = NDArray[np.float32]  # Shape: (frames,)
PlanarArray = NDArray[np.float32]   # Shape: (channels, frames)
PeakArray = NDArray[np.float32]     # Shape: (width, 2) -> (min, max) per column

# Callback types
PositionCallback = Callable[[float], None]           # seconds
StateCallback = Callable[[PlaybackState], None]
ClipsCallback = Callable[[], None]
FinishedCallback = Callable[[], None]
TickCallback = Callable[[], None]


class Decoder(Protocol):
    """Turns raw file bytes into a SampleBuffer or raises DecodeError."""
    def decode(self, data: bytes) -> "SampleBuffer": ...


@runtime_checkable
class FileDecoder(Decoder, Protocol):
    """
    Optional decoder extension that reads straight from a path. Decoders
    without it still work: the engine reads the file and calls decode().
    """
    def decode_file(self, file_path: str | os.PathLike) -> "SampleBuffer": ...


class ClockSource(Protocol):
    """Monotonic audio clock in seconds."""
    def now(self) -> float: ...


class TaskHandle(Protocol):
    """Handle of a repeating task. cancel() is idempotent."""
    @property
    def cancelled(self) -> bool: ...
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback repeatedly until the returned handle is cancelled."""
    def schedule(self, callback: TickCallback, interval: float) -> TaskHandle: ...


class OutputSession(Protocol):
    """One running emission of audio."""
    def stop(self) -> None: ...


class AudioOutput(Protocol):
    """
    Emits ``duration`` seconds of ``buffer`` starting at ``offset`` seconds.
    ``on_finished`` fires once emission ends, naturally or through stop().
    """
    def start(
        self,
        buffer: "SampleBuffer",
        offset: float,
        duration: float,
        on_finished: FinishedCallback,
    ) -> OutputSession: ...


class NameSuggester(Protocol):
    """Suggests a short clip name for a description; None when it cannot."""
    def suggest(self, description: str) -> Optional[str]: ...
