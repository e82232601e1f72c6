from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path

from .buffer import SampleBuffer
from .config import NAMING_CONFIG


@dataclass
class Clip:
    """
    An excerpt cut from a recording.
    Owns its own buffer and keeps the WAV encoding of it ready for export.
    """
    id: int
    name: str
    buffer: SampleBuffer = field(repr=False)
    wav_bytes: bytes = field(repr=False)

    @property
    def duration(self) -> float:
        return self.buffer.duration

    @property
    def filename(self) -> str:
        return f"{self.name}{NAMING_CONFIG.export_extension}"

    def to_artifact(self) -> "ExportArtifact":
        return ExportArtifact(filename=self.filename, data=self.wav_bytes)


@dataclass(frozen=True)
class ExportArtifact:
    """Encoded audio plus the file name it should be saved under."""
    filename: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    def write_to(self, directory: str | Path) -> Path:
        """Write the bytes into ``directory`` and return the file path."""
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        return path
