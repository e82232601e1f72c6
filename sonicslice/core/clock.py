"""
Clock source and repeating-task scheduler used to drive the playback cursor.
"""
from __future__ import annotations
import logging
import threading
import time

from .types import TickCallback

logger = logging.getLogger("SonicSlice")


class MonotonicClock:
    """Clock source backed by the high resolution performance counter."""

    def now(self) -> float:
        return time.perf_counter()


class RepeatingTask:
    """
    Calls ``callback`` every ``interval`` seconds on a daemon thread until
    cancelled. Cancelling is idempotent and may happen from inside the
    callback itself.
    """
    __slots__ = ('_callback', '_interval', '_stop_event', '_thread')

    def __init__(self, callback: TickCallback, interval: float) -> None:
        self._callback = callback
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name="sonicslice-tick", daemon=True)

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> "RepeatingTask":
        self._thread.start()
        return self

    def cancel(self) -> None:
        self._stop_event.set()

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self._callback()
            except Exception as e:
                logger.error("Tick callback error: %s", e, exc_info=True)
                self._stop_event.set()


class ThreadScheduler:
    """Scheduler that runs each repeating task on its own thread."""

    def schedule(self, callback: TickCallback, interval: float) -> RepeatingTask:
        return RepeatingTask(callback, interval).start()
