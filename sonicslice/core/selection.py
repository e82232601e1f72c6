"""
Selection range and pointer-driven boundary editing.

The drag logic is a small explicit state machine: it takes a pointer event,
the current selection and the current drag mode, and returns the new
selection and mode, plus a seek request when a press missed both handles.
Nothing here knows about a rendering surface.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional

from .config import SELECTION_CONFIG


@dataclass(frozen=True, slots=True)
class Selection:
    """Half-open time range [start, end) in seconds."""
    start: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.start

    def contains(self, t: float) -> bool:
        return self.start <= t < self.end

    def clamped(
        self,
        duration: float,
        min_gap: float = SELECTION_CONFIG.min_gap_seconds,
    ) -> "Selection":
        """
        Correct the range so that 0 <= start and start + min_gap <= end <= duration.

        The end is pushed out first; if that overruns the duration the start
        is pulled back instead. A source shorter than ``min_gap`` selects all.
        """
        if duration <= min_gap:
            return Selection(0.0, max(duration, 0.0))

        start = min(max(0.0, self.start), duration)
        end = min(max(0.0, self.end), duration)
        if end - start < min_gap:
            end = start + min_gap
            if end > duration:
                end = duration
                start = duration - min_gap
        return Selection(start, end)

    @classmethod
    def initial(cls, duration: float) -> "Selection":
        """Range selected right after a file is loaded."""
        return cls(0.0, min(duration, SELECTION_CONFIG.initial_length_seconds)).clamped(duration)


class DragMode(Enum):
    """Which boundary, if any, the pointer is currently dragging."""
    IDLE = auto()
    START = auto()
    END = auto()


class PointerAction(Enum):
    DOWN = auto()
    MOVE = auto()
    UP = auto()


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """Pointer position ``x`` in pixels over an editable region ``width`` pixels wide."""
    action: PointerAction
    x: float
    width: float


@dataclass(frozen=True, slots=True)
class DragResult:
    selection: Selection
    mode: DragMode
    seek_to: Optional[float] = None


@dataclass(frozen=True, slots=True)
class SelectionDragMachine:
    """
    Resolves pointer events into selection edits.

    A press within the handle tolerance of ``start`` grabs the start handle,
    else within tolerance of ``end`` grabs the end handle, else it is a seek.
    While dragging, only the grabbed boundary moves, capped so the selection
    never gets shorter than ``min_gap``.
    """
    min_gap: float = SELECTION_CONFIG.min_gap_seconds
    tolerance_ratio: float = SELECTION_CONFIG.handle_tolerance_ratio
    tolerance_pixels: float = SELECTION_CONFIG.handle_tolerance_pixels

    def pointer_time(self, x: float, width: float, duration: float) -> float:
        """Map a pixel position onto the timeline by linear proportion."""
        if width <= 0:
            return 0.0
        x = max(0.0, min(x, width))
        return (x / width) * duration

    def tolerance(self, width: float, duration: float) -> float:
        pixel_time = (self.tolerance_pixels / width) * duration if width > 0 else 0.0
        return max(duration * self.tolerance_ratio, pixel_time)

    def handle(
        self,
        event: PointerEvent,
        selection: Selection,
        mode: DragMode,
        duration: float,
    ) -> DragResult:
        t = self.pointer_time(event.x, event.width, duration)

        if event.action is PointerAction.DOWN:
            return self._press(t, event.width, selection, duration)
        if event.action is PointerAction.MOVE:
            return DragResult(self._drag(t, selection, mode, duration), mode)
        return DragResult(selection, DragMode.IDLE)

    def _press(self, t: float, width: float, selection: Selection, duration: float) -> DragResult:
        tol = self.tolerance(width, duration)
        # Start is checked first so it wins when both handles are in reach
        if abs(t - selection.start) < tol:
            return DragResult(selection, DragMode.START)
        if abs(t - selection.end) < tol:
            return DragResult(selection, DragMode.END)
        return DragResult(selection, DragMode.IDLE, seek_to=t)

    def _drag(self, t: float, selection: Selection, mode: DragMode, duration: float) -> Selection:
        if mode is DragMode.START:
            new_start = max(0.0, min(t, selection.end - self.min_gap))
            return replace(selection, start=new_start)
        if mode is DragMode.END:
            new_end = min(duration, max(t, selection.start + self.min_gap))
            return replace(selection, end=new_end)
        return selection
