from __future__ import annotations
from dataclasses import dataclass

from .buffer import SampleBuffer


@dataclass(frozen=True)
class AudioFile:
    """
    The recording currently open in the editor: its display name and the
    decoded samples.
    """
    name: str
    buffer: SampleBuffer

    @property
    def duration(self) -> float:
        return self.buffer.duration

    @property
    def base_name(self) -> str:
        """Everything before the first dot, used to name cuts."""
        return self.name.split(".")[0] or self.name
