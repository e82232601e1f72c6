"""
Ordered collection of cut clips.
Insertion order is the order clips are joined in.
"""
from __future__ import annotations
import itertools
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .buffer import SampleBuffer
from .clip import Clip
from .wav import encode_wav
from sonicslice.utils.logger import logger


@dataclass
class ClipRegistry:
    """
    Holds clips in the order they were cut.

    Only ``add`` inserts (always at the end) and only ``delete`` removes;
    nothing reorders. Identifiers come from a counter, so they are unique
    for the lifetime of the registry even after deletions.
    """
    clips: list[Clip] = field(default_factory=list)
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def add(self, buffer: SampleBuffer, name: str, wav_bytes: Optional[bytes] = None) -> Clip:
        """Append a clip for ``buffer`` and return it."""
        if wav_bytes is None:
            wav_bytes = encode_wav(buffer)
        clip = Clip(id=next(self._ids), name=name, buffer=buffer, wav_bytes=wav_bytes)
        self.clips.append(clip)
        logger.debug(f"Clip added: {clip.id} '{name}'")
        return clip

    def get(self, clip_id: int) -> Optional[Clip]:
        """Get clip by id safely."""
        for clip in self.clips:
            if clip.id == clip_id:
                return clip
        return None

    def rename(self, clip_id: int, name: str) -> bool:
        """Rename in place. Returns False if no clip has this id."""
        clip = self.get(clip_id)
        if clip is None:
            return False
        clip.name = name
        logger.debug(f"Clip {clip_id} renamed to '{name}'")
        return True

    def delete(self, clip_id: int) -> Optional[Clip]:
        """Remove a clip and return it, or None if no clip has this id."""
        clip = self.get(clip_id)
        if clip is None:
            return None
        self.clips.remove(clip)
        logger.debug(f"Clip {clip_id} deleted")
        return clip

    def buffers(self) -> list[SampleBuffer]:
        """Underlying buffers in join order."""
        return [clip.buffer for clip in self.clips]

    def clear(self) -> None:
        self.clips.clear()

    @property
    def total_duration(self) -> float:
        return sum(clip.duration for clip in self.clips)

    def __len__(self) -> int:
        return len(self.clips)

    def __iter__(self) -> Iterator[Clip]:
        return iter(self.clips)
