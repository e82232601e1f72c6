"""
Playback controller for SonicSlice.
Plays the selected range of the loaded buffer and keeps the visual cursor in
step with the audio clock.
"""
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .buffer import SampleBuffer
from .config import PLAYBACK_CONFIG, PlaybackState
from .selection import Selection
from .types import (
    AudioOutput,
    ClockSource,
    OutputSession,
    PositionCallback,
    Scheduler,
    StateCallback,
    TaskHandle,
)

logger = logging.getLogger("SonicSlice")


@dataclass(eq=False)
class _Session:
    """Bookkeeping for one active playback run."""
    start_offset: float  # clock time at which track time 0 would have played
    play_end: float      # selection end captured when playback started
    output: Optional[OutputSession] = None
    task: Optional[TaskHandle] = None


class PlaybackController:
    """
    Two-state (stopped/playing) transport over a single buffer.

    While playing, a repeating task samples the clock source and derives the
    track time as ``clock.now() - start_offset``. When the track time reaches
    the end of the selection, or the output reports that emission ended on
    its own, playback stops and the cursor snaps back to the selection start.

    All state changes happen under one lock so the tick thread and the
    caller never interleave. Once a session is torn down its tick can no
    longer touch the controller.
    """
    __slots__ = (
        '_clock', '_output', '_scheduler', '_tick_interval', '_lock',
        '_buffer', '_selection', '_current_time', '_state', '_session',
        '_on_position_changed', '_on_state_changed', '_disposed', '_ended_outputs'
    )

    def __init__(
        self,
        clock: ClockSource,
        output: AudioOutput,
        scheduler: Scheduler,
        on_position_changed: Optional[PositionCallback] = None,
        on_state_changed: Optional[StateCallback] = None,
        tick_interval: float = PLAYBACK_CONFIG.tick_interval,
    ) -> None:
        """
        Initialize playback controller.

        Args:
            clock: Monotonic clock source (seconds)
            output: Audio output that emits buffer ranges
            scheduler: Runs the cursor tick repeatedly
            on_position_changed: Callback for cursor updates (seconds)
            on_state_changed: Callback for state changes
            tick_interval: Seconds between cursor ticks
        """
        self._clock = clock
        self._output = output
        self._scheduler = scheduler
        self._tick_interval = tick_interval
        self._lock = threading.RLock()
        self._buffer: Optional[SampleBuffer] = None
        self._selection = Selection(0.0, 0.0)
        self._current_time: float = 0.0
        self._state = PlaybackState.STOPPED
        self._session: Optional[_Session] = None
        self._on_position_changed = on_position_changed
        self._on_state_changed = on_state_changed
        self._disposed: bool = False
        self._ended_outputs: list[OutputSession] = []

    @property
    def current_time(self) -> float:
        """Cursor position in seconds."""
        return self._current_time

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def duration(self) -> float:
        return self._buffer.duration if self._buffer is not None else 0.0

    def _set_state(self, state: PlaybackState) -> None:
        if self._state != state:
            self._state = state
            if self._on_state_changed and not self._disposed:
                _notify(self._on_state_changed, state)

    def _set_position(self, seconds: float) -> None:
        self._current_time = seconds
        if self._on_position_changed and not self._disposed:
            _notify(self._on_position_changed, seconds)

    # --- Source management ---

    def load(self, buffer: Optional[SampleBuffer], selection: Selection) -> None:
        """Replace the source buffer, stopping any playback first."""
        with self._lock:
            outputs = self._teardown_session()
            self._buffer = buffer
            self._selection = selection
            self._set_state(PlaybackState.STOPPED)
            self._set_position(selection.start)
        _stop_outputs(outputs)

    def set_selection(self, selection: Selection) -> None:
        """
        Update the play range. The play state is untouched; a running cursor
        outside the new range keeps going until the next stop or seek.
        """
        with self._lock:
            self._selection = selection

    # --- Transport ---

    def play(self) -> bool:
        """
        Start playing from the cursor, or from the selection start when the
        cursor sits outside the selection. A running session is stopped
        first.

        Returns:
            True if playback started
        """
        with self._lock:
            if self._disposed or self._buffer is None:
                return False

            stale = self._teardown_session()
            buffer = self._buffer
            sel = self._selection
            start = self._current_time
            if not sel.contains(start):
                start = sel.start
                self._set_position(start)

            duration = sel.end - start
            session = None
            if duration > 0:
                session = _Session(start_offset=self._clock.now() - start, play_end=sel.end)
                self._session = session
                self._set_state(PlaybackState.PLAYING)
            else:
                self._set_state(PlaybackState.STOPPED)

        # Outside the lock: the output may fire its finished callback from
        # the audio thread while stopping.
        _stop_outputs(stale)
        if session is None:
            return False

        try:
            output = self._output.start(
                buffer, start, duration,
                on_finished=lambda: self._on_output_finished(session),
            )
        except Exception as e:
            logger.error("Failed to start playback: %s", e, exc_info=True)
            with self._lock:
                if self._session is session:
                    self._session = None
                    self._set_state(PlaybackState.STOPPED)
            return False

        with self._lock:
            superseded = self._session is not session
            if not superseded:
                session.output = output
                session.task = self._scheduler.schedule(
                    lambda: self._tick(session), self._tick_interval
                )
        if superseded:
            # Stopped while the output was starting
            _stop_outputs([output])
            return False
        logger.info("Playback started at %.3fs (until %.3fs)", start, sel.end)
        return True

    def pause(self) -> None:
        """Stop emission and keep the cursor where it is for resume."""
        with self._lock:
            session = self._session
            if session is not None:
                position = min(self._clock.now() - session.start_offset, session.play_end)
            outputs = self._teardown_session()
            if session is not None:
                self._set_position(max(position, 0.0))
                self._set_state(PlaybackState.STOPPED)
        _stop_outputs(outputs)
        if session is not None:
            logger.info("Playback paused at %.3fs", self._current_time)

    def toggle_play_pause(self) -> bool:
        """Toggle between playing and stopped. Returns True when now playing."""
        if self.is_playing:
            self.pause()
            return False
        return self.play()

    def seek(self, seconds: float) -> None:
        """Stop playback and move the cursor, clamped to the buffer."""
        with self._lock:
            outputs = self._teardown_session()
            self._set_state(PlaybackState.STOPPED)
            self._set_position(max(0.0, min(seconds, self.duration)))
        _stop_outputs(outputs)
        logger.info("Seek to %.3fs", self._current_time)

    # --- Clock loop ---

    def _tick(self, session: _Session) -> None:
        """Sample the clock and advance the cursor or finish playback."""
        with self._lock:
            if self._session is not session:
                return
            try:
                track_time = self._clock.now() - session.start_offset
            except Exception as e:
                logger.error("Clock error, stopping playback: %s", e, exc_info=True)
                outputs = self._teardown_session()
                self._set_state(PlaybackState.STOPPED)
            else:
                if track_time < session.play_end:
                    self._set_position(track_time)
                    return
                outputs = self._finish()
        _stop_outputs(outputs)

    def _on_output_finished(self, session: _Session) -> None:
        # Runs on the audio thread, so the ended stream is closed later by
        # whichever call next tears down playback.
        with self._lock:
            if self._session is not session:
                return
            logger.debug("Output reported end of emission")
            self._ended_outputs.extend(self._finish())

    def _finish(self) -> list[OutputSession]:
        """Range exhausted: stop and loop the cursor back to the selection start."""
        outputs = self._teardown_session()
        self._set_state(PlaybackState.STOPPED)
        self._set_position(self._selection.start)
        logger.info("Playback reached end of selection")
        return outputs

    def _teardown_session(self) -> list[OutputSession]:
        """
        Detach the active session and cancel its tick. Returns every output
        session still to be stopped, including ones that ended on their own.
        The caller stops them outside the lock.
        """
        outputs, self._ended_outputs = self._ended_outputs, []
        session = self._session
        if session is None:
            return outputs
        self._session = None
        if session.task is not None:
            session.task.cancel()
        if session.output is not None:
            outputs.append(session.output)
        return outputs

    def stop(self) -> None:
        """Stop playback and return the cursor to the selection start."""
        with self._lock:
            outputs = self._teardown_session()
            self._set_state(PlaybackState.STOPPED)
            self._set_position(self._selection.start)
        _stop_outputs(outputs)
        logger.info("Playback stopped")

    def cleanup(self) -> None:
        """Stop everything and drop external callbacks."""
        with self._lock:
            self._disposed = True
            self._on_position_changed = None
            self._on_state_changed = None
            outputs = self._teardown_session()
            self._state = PlaybackState.STOPPED
        _stop_outputs(outputs)


def _notify(callback, value) -> None:
    # A failing listener must not leave the transport half updated.
    try:
        callback(value)
    except Exception as e:
        logger.error("Playback listener error: %s", e, exc_info=True)


def _stop_outputs(outputs: list[OutputSession]) -> None:
    for output in outputs:
        try:
            output.stop()
        except Exception as e:
            logger.warning("Error stopping output: %s", e)
