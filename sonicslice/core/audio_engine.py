from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

from sonicslice.core.audio_file import AudioFile
from sonicslice.core.buffer import SampleBuffer
from sonicslice.core.clip import Clip, ExportArtifact
from sonicslice.core.clip_registry import ClipRegistry
from sonicslice.core.clock import MonotonicClock, ThreadScheduler
from sonicslice.core.config import NAMING_CONFIG, PlaybackState
from sonicslice.core.decoder import SoundFileDecoder
from sonicslice.core.exceptions import DecodeError
from sonicslice.core.naming import cut_name, fallback_clip_name, join_name
from sonicslice.core.peaks import compute_peaks
from sonicslice.core.playback import PlaybackController
from sonicslice.core.selection import (
    DragMode,
    PointerAction,
    PointerEvent,
    Selection,
    SelectionDragMachine,
)
from sonicslice.core.transforms import join_buffers, slice_buffer
from sonicslice.core.types import (
    AudioOutput,
    ClipsCallback,
    ClockSource,
    Decoder,
    FileDecoder,
    NameSuggester,
    PeakArray,
    PositionCallback,
    Scheduler,
    StateCallback,
)
from sonicslice.core.wav import encode_wav
from sonicslice.utils.logger import logger


class AudioEngine:
    """
    Core engine: owns the loaded recording, the selection, playback and the
    clip registry. Every collaborator that touches the outside world
    (decoding, the clock, audio output, naming) is injected.
    """

    def __init__(
        self,
        decoder: Optional[Decoder] = None,
        output: Optional[AudioOutput] = None,
        clock: Optional[ClockSource] = None,
        scheduler: Optional[Scheduler] = None,
        namer: Optional[NameSuggester] = None,
        drag_machine: Optional[SelectionDragMachine] = None,
        on_position_changed: Optional[PositionCallback] = None,
        on_state_changed: Optional[StateCallback] = None,
        on_clips_changed: Optional[ClipsCallback] = None,
    ):
        if output is None:
            from sonicslice.core.audio_output import SoundDeviceOutput
            output = SoundDeviceOutput()

        self.decoder = decoder or SoundFileDecoder()
        self.namer = namer
        self.drag_machine = drag_machine or SelectionDragMachine()
        self.playback = PlaybackController(
            clock or MonotonicClock(),
            output,
            scheduler or ThreadScheduler(),
            on_position_changed=on_position_changed,
            on_state_changed=on_state_changed,
        )
        self.clips = ClipRegistry()
        self.audio_file: Optional[AudioFile] = None
        self.drag_mode = DragMode.IDLE
        self._on_clips_changed = on_clips_changed
        self._peak_cache: dict[int, PeakArray] = {}
        logger.info("AudioEngine initialized")

    # --- State ---

    @property
    def buffer(self) -> Optional[SampleBuffer]:
        return self.audio_file.buffer if self.audio_file else None

    @property
    def duration(self) -> float:
        return self.audio_file.duration if self.audio_file else 0.0

    @property
    def selection(self) -> Selection:
        return self.playback.selection

    @property
    def current_time(self) -> float:
        return self.playback.current_time

    @property
    def is_playing(self) -> bool:
        return self.playback.is_playing

    @property
    def state(self) -> PlaybackState:
        return self.playback.state

    def _clips_changed(self):
        if self._on_clips_changed:
            self._on_clips_changed()

    # --- File I/O ---

    def load_bytes(self, data: bytes, name: str) -> AudioFile:
        """
        Decode a recording and make it the open file.
        On DecodeError the previous file, selection and cursor stay as they were.
        """
        logger.info(f"Loading {name} ({len(data)} bytes)")
        try:
            buffer = self.decoder.decode(data)
        except DecodeError as e:
            logger.error(f"Failed to load {name}: {e}", exc_info=True)
            raise
        return self._open(AudioFile(name=name, buffer=buffer))

    def load_file(self, file_path):
        """Reads a file from disk and opens it."""
        if not isinstance(self.decoder, FileDecoder):
            return self.load_bytes(Path(file_path).read_bytes(), os.path.basename(file_path))
        logger.info(f"Loading {file_path}")
        try:
            buffer = self.decoder.decode_file(file_path)
        except DecodeError as e:
            logger.error(f"Failed to load {file_path}: {e}", exc_info=True)
            raise
        return self._open(AudioFile(name=os.path.basename(file_path), buffer=buffer))

    def load_buffer(self, buffer: SampleBuffer, name: str) -> AudioFile:
        """Open an already decoded buffer."""
        return self._open(AudioFile(name=name, buffer=buffer))

    def _open(self, audio_file: AudioFile) -> AudioFile:
        self.audio_file = audio_file
        self.drag_mode = DragMode.IDLE
        self._peak_cache.clear()
        self.playback.load(audio_file.buffer, Selection.initial(audio_file.duration))
        logger.info(f"Opened {audio_file.name}: {audio_file.buffer!r}")
        return audio_file

    def unload(self):
        """Closes the open file. Clips are kept."""
        self.audio_file = None
        self.drag_mode = DragMode.IDLE
        self._peak_cache.clear()
        self.playback.load(None, Selection(0.0, 0.0))
        logger.info("File closed")

    # --- Waveform ---

    def waveform_peaks(self, width: int) -> Optional[PeakArray]:
        """Per-pixel (min, max) pairs for the open file, cached per width."""
        if self.buffer is None:
            return None
        if width not in self._peak_cache:
            peaks = compute_peaks(self.buffer, width)
            peaks.flags.writeable = False
            self._peak_cache[width] = peaks
        return self._peak_cache[width]

    # --- Selection ---

    def set_selection(self, start: float, end: float) -> Selection:
        """Sets the range, clamped to the file. Play state is not changed."""
        selection = Selection(start, end).clamped(self.duration)
        self.playback.set_selection(selection)
        return selection

    def pointer_down(self, x: float, width: float) -> None:
        self._pointer(PointerEvent(PointerAction.DOWN, x, width))

    def pointer_move(self, x: float, width: float) -> None:
        self._pointer(PointerEvent(PointerAction.MOVE, x, width))

    def pointer_up(self, x: float, width: float) -> None:
        self._pointer(PointerEvent(PointerAction.UP, x, width))

    def _pointer(self, event: PointerEvent) -> None:
        if self.audio_file is None:
            return
        result = self.drag_machine.handle(event, self.selection, self.drag_mode, self.duration)
        self.drag_mode = result.mode
        if result.selection != self.selection:
            self.playback.set_selection(result.selection)
        if result.seek_to is not None:
            self.seek(result.seek_to)

    # --- Playback Control ---

    def toggle_play_pause(self) -> bool:
        return self.playback.toggle_play_pause()

    def seek(self, seconds: float) -> None:
        self.playback.seek(seconds)

    def stop(self) -> None:
        self.playback.stop()

    # --- Clips ---

    def cut(self) -> Optional[Clip]:
        """
        Slices the selection out of the open file, encodes it and stores it
        as a new clip. Returns None when no file is open.
        """
        if self.audio_file is None:
            return None
        sel = self.selection
        buffer = slice_buffer(self.audio_file.buffer, sel.start, sel.end)
        wav_bytes = encode_wav(buffer)
        clip = self.clips.add(buffer, cut_name(self.audio_file.base_name), wav_bytes)
        logger.info(f"Cut {sel.start:.2f}-{sel.end:.2f}s into clip '{clip.name}'")
        self._clips_changed()
        return clip

    def rename_clip(self, clip_id: int, name: str) -> bool:
        renamed = self.clips.rename(clip_id, name)
        if renamed:
            self._clips_changed()
        return renamed

    def smart_rename_clip(self, clip_id: int, description: str) -> Optional[str]:
        """
        Renames a clip using the naming assistant. Falls back to a timestamp
        name when there is no assistant or it has nothing to offer.
        A blank description leaves the clip untouched and returns None.
        """
        if self.clips.get(clip_id) is None or not description.strip():
            return None
        name = self.namer.suggest(description) if self.namer else None
        if not name:
            name = fallback_clip_name()
        self.rename_clip(clip_id, name)
        return name

    def delete_clip(self, clip_id: int) -> bool:
        deleted = self.clips.delete(clip_id) is not None
        if deleted:
            self._clips_changed()
        return deleted

    def export_clip(self, clip_id: int) -> Optional[ExportArtifact]:
        clip = self.clips.get(clip_id)
        return clip.to_artifact() if clip else None

    def join_clips(self) -> ExportArtifact:
        """Joins every clip in registry order into one WAV artifact."""
        joined = join_buffers(self.clips.buffers())
        artifact = ExportArtifact(
            filename=f"{join_name()}{NAMING_CONFIG.export_extension}", data=encode_wav(joined)
        )
        logger.info(f"Joined {len(self.clips)} clips into {artifact.filename} ({joined.duration:.2f}s)")
        return artifact

    def close(self):
        """Releases playback resources."""
        self.playback.cleanup()
