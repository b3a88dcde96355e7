"""Indexed access to BSOR replays.

``index`` decodes the header and the info section, then records where every
section lives in the stream without decoding its records. Any section can
later be decoded on its own with ``materialize`` (or ``SectionHandle.load``)
against the same file, in any order and as often as needed.

Frames usually make up the bulk of a replay, so indexing first and loading
only notes keeps memory use low:

    with open("replay.bsor", "rb") as f:
        idx = index(f)
        notes = idx.notes.load(f)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO

from .errors import ReplayIOError
from .reader import _Reader, require_seekable
from .sections import SECTIONS, parse_header
from .types import Frame, Height, Info, Note, Pause, SectionKind, Wall

log = logging.getLogger("bsor")


@dataclass(frozen=True)
class SectionHandle:
    """Position of one section inside the stream it was indexed from.

    ``offset`` points at the section tag; ``byte_length`` covers the tag, the
    record count and every record.
    """

    kind: SectionKind
    offset: int
    byte_length: int
    item_count: int

    @property
    def end(self) -> int:
        return self.offset + self.byte_length

    def __len__(self) -> int:
        return self.item_count

    def is_empty(self) -> bool:
        return self.item_count == 0

    def load(self, f: BinaryIO) -> Any:
        return materialize(self, f)


@dataclass()
class ReplayIndex:
    version: int
    info: Info
    info_section: SectionHandle
    frames: SectionHandle
    notes: SectionHandle
    walls: SectionHandle
    heights: SectionHandle
    pauses: SectionHandle

    @property
    def sections(self) -> tuple[SectionHandle, ...]:
        """All six handles in file order."""
        return (
            self.info_section, self.frames, self.notes,
            self.walls, self.heights, self.pauses,
        )

    def load_frames(self, f: BinaryIO) -> list[Frame]:
        return materialize(self.frames, f)

    def load_notes(self, f: BinaryIO) -> list[Note]:
        return materialize(self.notes, f)

    def load_walls(self, f: BinaryIO) -> list[Wall]:
        return materialize(self.walls, f)

    def load_heights(self, f: BinaryIO) -> list[Height]:
        return materialize(self.heights, f)

    def load_pauses(self, f: BinaryIO) -> list[Pause]:
        return materialize(self.pauses, f)


def _index_section(r: _Reader, kind: SectionKind, stream_size: int) -> SectionHandle:
    offset = r.tell()
    byte_length, count = SECTIONS[kind].measure(r)
    handle = SectionHandle(kind=kind, offset=offset, byte_length=byte_length, item_count=count)

    if handle.end > stream_size:
        raise ReplayIOError(
            f"{kind.name} section ends at byte {handle.end}, "
            f"past the end of the stream ({stream_size} bytes)"
        )

    log.debug(
        "Indexed %s: offset=%d bytes=%d items=%d",
        kind.name.lower(), offset, byte_length, count,
    )
    r.seek(handle.end)
    return handle


def index(f: BinaryIO) -> ReplayIndex:
    """Index a replay from a readable, seekable binary stream.

    The header and info section are decoded; every other section is only
    measured. Handles are valid against ``f`` (or another stream over the
    same bytes) only.
    """
    require_seekable(f)
    r = _Reader(f)
    stream_size = r.size()

    version = parse_header(r)

    info_offset = r.tell()
    info = SECTIONS[SectionKind.INFO].parse(r)
    info_section = SectionHandle(
        kind=SectionKind.INFO,
        offset=info_offset,
        byte_length=r.tell() - info_offset,
        item_count=1,
    )

    replay_index = ReplayIndex(
        version=version,
        info=info,
        info_section=info_section,
        frames=_index_section(r, SectionKind.FRAMES, stream_size),
        notes=_index_section(r, SectionKind.NOTES, stream_size),
        walls=_index_section(r, SectionKind.WALLS, stream_size),
        heights=_index_section(r, SectionKind.HEIGHTS, stream_size),
        pauses=_index_section(r, SectionKind.PAUSES, stream_size),
    )

    log.info(
        "BSOR indexed: %d frames, %d notes, %d walls, %d heights, %d pauses",
        len(replay_index.frames), len(replay_index.notes), len(replay_index.walls),
        len(replay_index.heights), len(replay_index.pauses),
    )
    return replay_index


def materialize(handle: SectionHandle, f: BinaryIO) -> Any:
    """Decode the section ``handle`` points at.

    Returns the record list for record sections and the ``Info`` for the
    info section.
    """
    require_seekable(f)
    r = _Reader(f)
    log.debug("Loading %s section at offset %d", handle.kind.name.lower(), handle.offset)
    r.seek(handle.offset)
    return SECTIONS[handle.kind].parse(r)
