"""BSOR data model — dataclasses for every replay structure.

Values are stored exactly as decoded from the file. Vectors are plain float
tuples: Vector3 is (x, y, z), Vector4 is (x, y, z, w).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

Vector3 = tuple[float, float, float]
Vector4 = tuple[float, float, float, float]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class _CodeTable(IntEnum):
    """Closed code table; any code outside the table maps to UNKNOWN."""

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN  # type: ignore[attr-defined]


class SectionKind(IntEnum):
    """Section order in the file; the value doubles as the wire tag."""

    INFO = 0
    FRAMES = 1
    NOTES = 2
    WALLS = 3
    HEIGHTS = 4
    PAUSES = 5


class NoteEventType(_CodeTable):
    GOOD = 0
    BAD = 1
    MISS = 2
    BOMB = 3
    UNKNOWN = 255

    @property
    def has_cut_info(self) -> bool:
        return self in (NoteEventType.GOOD, NoteEventType.BAD)


class NoteScoringType(_CodeTable):
    NORMAL_OLD = 0
    IGNORE = 1
    NO_SCORE = 2
    NORMAL = 3
    SLIDER_HEAD = 4
    SLIDER_TAIL = 5
    BURST_SLIDER_HEAD = 6
    BURST_SLIDER_ELEMENT = 7
    UNKNOWN = 255


class CutDirection(_CodeTable):
    TOP_CENTER = 0
    BOTTOM_CENTER = 1
    MIDDLE_LEFT = 2
    MIDDLE_RIGHT = 3
    TOP_LEFT = 4
    TOP_RIGHT = 5
    BOTTOM_LEFT = 6
    BOTTOM_RIGHT = 7
    DOT = 8
    UNKNOWN = 255


class ColorType(_CodeTable):
    RED = 0
    BLUE = 1
    UNKNOWN = 255


# ---------------------------------------------------------------------------
# Info
# ---------------------------------------------------------------------------

@dataclass()
class Info:
    """Replay metadata: player, hardware, song and score."""

    version: str  # mod version that recorded the replay
    game_version: str
    timestamp: int  # unix seconds, stored as a decimal string
    player_id: str
    player_name: str
    platform: str
    tracking_system: str
    hmd: str
    controller: str
    hash: str  # map hash
    song_name: str
    mapper: str
    difficulty: str
    score: int
    mode: str
    environment: str
    modifiers: str  # comma separated modifier codes
    jump_distance: float
    left_handed: bool
    height: float
    start_time: float
    fail_time: float  # 0.0 when the map was passed
    speed: float


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------

@dataclass()
class PositionAndRotation:
    position: Vector3
    rotation: Vector4  # quaternion (x, y, z, w)


@dataclass()
class Frame:
    time: float
    fps: int
    head: PositionAndRotation
    left_hand: PositionAndRotation
    right_hand: PositionAndRotation


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------

@dataclass()
class NoteCutInfo:
    speed_ok: bool
    direction_ok: bool
    saber_type_ok: bool
    was_cut_too_soon: bool
    saber_speed: float
    saber_dir: Vector3
    saber_type: ColorType
    time_deviation: float
    cut_dir_deviation: float
    cut_point: Vector3
    cut_normal: Vector3
    cut_distance_to_center: float
    cut_angle: float
    before_cut_rating: float
    after_cut_rating: float


@dataclass()
class Note:
    scoring_type: NoteScoringType
    line_index: int
    line_layer: int
    color_type: ColorType
    cut_direction: CutDirection
    event_time: float
    spawn_time: float
    event_type: NoteEventType
    cut_info: NoteCutInfo | None = None  # only for GOOD / BAD events


# ---------------------------------------------------------------------------
# Walls, heights, pauses
# ---------------------------------------------------------------------------

@dataclass()
class Wall:
    line_index: int
    obstacle_type: int
    width: int
    energy: float
    time: float
    spawn_time: float


@dataclass()
class Height:
    height: float
    time: float


@dataclass()
class Pause:
    duration: int  # u64
    time: float


# ---------------------------------------------------------------------------
# Top-level replay
# ---------------------------------------------------------------------------

@dataclass()
class Replay:
    version: int
    info: Info
    frames: list[Frame] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    walls: list[Wall] = field(default_factory=list)
    heights: list[Height] = field(default_factory=list)
    pauses: list[Pause] = field(default_factory=list)
