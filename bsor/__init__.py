"""bsor — reader for BS Open Replay (.bsor) files.

Two ways in: ``load``/``parse`` decode the whole replay, ``index`` decodes only
the header and info and lets sections be loaded one at a time later.
"""

import logging

from .errors import (
    DecodingError,
    InvalidFormatError,
    ReplayError,
    ReplayIOError,
    UnsupportedVersionError,
)
from .index import ReplayIndex, SectionHandle, index, materialize
from .parser import load, parse
from .types import (
    ColorType,
    CutDirection,
    Frame,
    Height,
    Info,
    Note,
    NoteCutInfo,
    NoteEventType,
    NoteScoringType,
    Pause,
    PositionAndRotation,
    Replay,
    SectionKind,
    Wall,
)

log = logging.getLogger("bsor")

__all__ = [
    "ColorType",
    "CutDirection",
    "DecodingError",
    "Frame",
    "Height",
    "Info",
    "InvalidFormatError",
    "Note",
    "NoteCutInfo",
    "NoteEventType",
    "NoteScoringType",
    "Pause",
    "PositionAndRotation",
    "Replay",
    "ReplayError",
    "ReplayIOError",
    "ReplayIndex",
    "SectionHandle",
    "SectionKind",
    "UnsupportedVersionError",
    "Wall",
    "index",
    "load",
    "materialize",
    "parse",
]
