"""BSOR replay loader — decodes a whole replay into memory.

Sections are read in file order from a forward-only stream; no seeking is
needed. Use ``bsor.index`` instead when only some sections are wanted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from .reader import _Reader
from .sections import SECTIONS, parse_header, parse_info
from .types import Replay, SectionKind

log = logging.getLogger("bsor")


def load(f: BinaryIO) -> Replay:
    """Decode a complete replay from a readable binary stream.

    Raises a ``ReplayError`` subclass on the first problem; nothing is
    returned for a partially decoded file.
    """
    r = _Reader(f)

    version = parse_header(r)
    info = parse_info(r)

    replay = Replay(
        version=version,
        info=info,
        frames=SECTIONS[SectionKind.FRAMES].parse(r),
        notes=SECTIONS[SectionKind.NOTES].parse(r),
        walls=SECTIONS[SectionKind.WALLS].parse(r),
        heights=SECTIONS[SectionKind.HEIGHTS].parse(r),
        pauses=SECTIONS[SectionKind.PAUSES].parse(r),
    )

    log.info(
        "BSOR loaded: %d frames, %d notes, %d walls, %d heights, %d pauses",
        len(replay.frames), len(replay.notes), len(replay.walls),
        len(replay.heights), len(replay.pauses),
    )
    return replay


def parse(filepath: str | Path) -> Replay:
    """Parse a .bsor file and return the full Replay."""
    filepath = Path(filepath)
    log.info("Parsing BSOR: %s", filepath.name)

    with open(filepath, "rb") as f:
        return load(f)
