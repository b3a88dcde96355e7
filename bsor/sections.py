"""Section codecs — framing, record layouts and per-section size rules.

A BSOR file is a 5-byte header followed by six sections in fixed order. Every
section starts with a 1-byte tag (its ``SectionKind`` value); the five record
sections follow the tag with an i32 record count and the records themselves.

Frames, walls, heights and pauses have fixed-width records, so their byte
length is known from the count alone. A note record is 16 bytes, plus a
72-byte cut info block when its event type is GOOD or BAD, so measuring the
notes section means visiting every record's event type field.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Any, Callable

from .errors import DecodingError, InvalidFormatError, UnsupportedVersionError
from .reader import _Reader
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
    SectionKind,
    Wall,
)

log = logging.getLogger("bsor")

BSOR_MAGIC = 0x442D3D69
SUPPORTED_VERSION = 1

HEADER_SIZE = 5  # magic:i32 + version:u8
SECTION_PREAMBLE_SIZE = 5  # tag:u8 + count:i32

# ---------------------------------------------------------------------------
# Record layouts
# ---------------------------------------------------------------------------

_POSITION_AND_ROTATION = "3f4f"

_FRAME = struct.Struct("<fi" + _POSITION_AND_ROTATION * 3)
# packed id, event time, spawn time, event type
_NOTE_HEAD = struct.Struct("<iffi")
# 4 flags, saber speed, saber dir, saber type, time deviation, cut dir deviation,
# cut point, cut normal, distance to center, angle, before rating, after rating
_NOTE_CUT_INFO = struct.Struct("<4Bf3fi2f3f3f4f")
_WALL = struct.Struct("<ifff")
_HEIGHT = struct.Struct("<ff")
_PAUSE = struct.Struct("<Qf")

POSITION_AND_ROTATION_SIZE = struct.calcsize("<" + _POSITION_AND_ROTATION)  # 28
FRAME_SIZE = _FRAME.size  # 92
NOTE_HEAD_SIZE = _NOTE_HEAD.size  # 16
NOTE_CUT_INFO_SIZE = _NOTE_CUT_INFO.size  # 72
WALL_SIZE = _WALL.size  # 16
HEIGHT_SIZE = _HEIGHT.size  # 8
PAUSE_SIZE = _PAUSE.size  # 12

# Event type sits after packed id + event time + spawn time.
_NOTE_EVENT_TYPE_OFFSET = 12


# ---------------------------------------------------------------------------
# Header and framing
# ---------------------------------------------------------------------------

def parse_header(r: _Reader) -> int:
    """Check magic and version, return the version byte."""
    magic = r.read_int32()
    if magic != BSOR_MAGIC:
        raise InvalidFormatError(f"Not a BSOR file: magic=0x{magic & 0xFFFFFFFF:08x}")

    version = r.read_uint8()
    if version != SUPPORTED_VERSION:
        raise UnsupportedVersionError(version)
    return version


def _expect_tag(r: _Reader, kind: SectionKind) -> None:
    tag = r.read_uint8()
    if tag != kind:
        raise InvalidFormatError(
            f"Expected {kind.name} section (tag {int(kind)}), found tag {tag}"
        )


def _read_count(r: _Reader, kind: SectionKind) -> int:
    count = r.read_int32()
    if count < 0:
        raise InvalidFormatError(f"Negative record count in {kind.name} section: {count}")
    return count


# ---------------------------------------------------------------------------
# Info
# ---------------------------------------------------------------------------

def _parse_timestamp(raw: str) -> int:
    digits = raw[1:] if raw.startswith("+") else raw
    if not (digits.isascii() and digits.isdigit()):
        raise DecodingError(f"Timestamp is not a number: {raw!r}")
    value = int(digits)
    if value > 0xFFFFFFFF:
        raise DecodingError(f"Timestamp out of range: {raw}")
    return value


def parse_info(r: _Reader) -> Info:
    _expect_tag(r, SectionKind.INFO)

    version = r.read_text()
    game_version = r.read_text()
    timestamp = _parse_timestamp(r.read_text())
    player_id = r.read_text()
    player_name = r.read_text()
    platform = r.read_text()
    tracking_system = r.read_text()
    hmd = r.read_text()
    controller = r.read_text()
    song_hash = r.read_text()
    song_name = r.read_text()
    mapper = r.read_text()
    difficulty = r.read_text()
    score = r.read_int32()
    mode = r.read_text()
    environment = r.read_text()
    modifiers = r.read_text()
    jump_distance = r.read_float()
    left_handed = r.read_bool()
    height = r.read_float()
    start_time = r.read_float()
    fail_time = r.read_float()
    speed = r.read_float()

    return Info(
        version=version, game_version=game_version, timestamp=timestamp,
        player_id=player_id, player_name=player_name,
        platform=platform, tracking_system=tracking_system,
        hmd=hmd, controller=controller,
        hash=song_hash, song_name=song_name, mapper=mapper,
        difficulty=difficulty, score=score,
        mode=mode, environment=environment, modifiers=modifiers,
        jump_distance=jump_distance, left_handed=left_handed,
        height=height, start_time=start_time,
        fail_time=fail_time, speed=speed,
    )


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def _parse_position_and_rotation(r: _Reader) -> PositionAndRotation:
    return PositionAndRotation(position=r.read_vec3(), rotation=r.read_vec4())


def _parse_frame(r: _Reader) -> Frame:
    time = r.read_float()
    fps = r.read_int32()
    head = _parse_position_and_rotation(r)
    left_hand = _parse_position_and_rotation(r)
    right_hand = _parse_position_and_rotation(r)
    return Frame(time=time, fps=fps, head=head, left_hand=left_hand, right_hand=right_hand)


def note_size(event_type: NoteEventType) -> int:
    """On-disk width of a note record with the given event type."""
    if event_type.has_cut_info:
        return NOTE_HEAD_SIZE + NOTE_CUT_INFO_SIZE
    return NOTE_HEAD_SIZE


def _parse_note_cut_info(r: _Reader) -> NoteCutInfo:
    v = r.read_struct(_NOTE_CUT_INFO)
    return NoteCutInfo(
        speed_ok=v[0] == 1,
        direction_ok=v[1] == 1,
        saber_type_ok=v[2] == 1,
        was_cut_too_soon=v[3] == 1,
        saber_speed=v[4],
        saber_dir=v[5:8],
        saber_type=ColorType(v[8] & 0xFF),  # low byte only
        time_deviation=v[9],
        cut_dir_deviation=v[10],
        cut_point=v[11:14],
        cut_normal=v[14:17],
        cut_distance_to_center=v[17],
        cut_angle=v[18],
        before_cut_rating=v[19],
        after_cut_rating=v[20],
    )


def _parse_note(r: _Reader) -> Note:
    note_id, event_time, spawn_time, event_code = r.read_struct(_NOTE_HEAD)

    # scoring*10000 + line index*1000 + line layer*100 + color*10 + cut direction
    scoring_type, note_id = divmod(note_id, 10000)
    line_index, note_id = divmod(note_id, 1000)
    line_layer, note_id = divmod(note_id, 100)
    color_type, cut_direction = divmod(note_id, 10)

    event_type = NoteEventType(event_code)
    cut_info = _parse_note_cut_info(r) if event_type.has_cut_info else None

    return Note(
        scoring_type=NoteScoringType(scoring_type),
        line_index=line_index,
        line_layer=line_layer,
        color_type=ColorType(color_type),
        cut_direction=CutDirection(cut_direction),
        event_time=event_time,
        spawn_time=spawn_time,
        event_type=event_type,
        cut_info=cut_info,
    )


def _scan_notes(r: _Reader, count: int) -> int:
    """Byte length of ``count`` note records, reading only their event types."""
    total = 0
    for _ in range(count):
        r.skip(_NOTE_EVENT_TYPE_OFFSET)
        size = note_size(NoteEventType(r.read_int32()))
        r.skip(size - NOTE_HEAD_SIZE)
        total += size
    return total


def _parse_wall(r: _Reader) -> Wall:
    wall_id, energy, time, spawn_time = r.read_struct(_WALL)
    # line index*100 + obstacle type*10 + width
    line_index, wall_id = divmod(wall_id, 100)
    obstacle_type, width = divmod(wall_id, 10)
    return Wall(
        line_index=line_index,
        obstacle_type=obstacle_type,
        width=width,
        energy=energy,
        time=time,
        spawn_time=spawn_time,
    )


def _parse_height(r: _Reader) -> Height:
    height, time = r.read_struct(_HEIGHT)
    return Height(height=height, time=time)


def _parse_pause(r: _Reader) -> Pause:
    duration = r.read_uint64()
    time = r.read_float()
    return Pause(duration=duration, time=time)


# ---------------------------------------------------------------------------
# Section table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SectionCodec:
    """Decode and measure routines for one section kind.

    ``parse`` decodes the whole section starting at its tag. ``measure``
    starts at the tag too and returns ``(byte_length, item_count)``; the
    stream position afterwards is unspecified, callers seek to
    ``offset + byte_length`` themselves. Info has no ``measure``: its strings
    can only be sized by decoding it.
    """

    kind: SectionKind
    parse: Callable[[_Reader], Any]
    measure: Callable[[_Reader], tuple[int, int]] | None = None


def _record_section(
    kind: SectionKind,
    parse_record: Callable[[_Reader], Any],
    record_size: int | None = None,
    scan: Callable[[_Reader, int], int] | None = None,
) -> SectionCodec:
    def parse(r: _Reader) -> list:
        _expect_tag(r, kind)
        count = _read_count(r, kind)
        log.debug("Parsing %d %s records", count, kind.name.lower())
        return [parse_record(r) for _ in range(count)]

    def measure(r: _Reader) -> tuple[int, int]:
        _expect_tag(r, kind)
        count = _read_count(r, kind)
        if scan is not None:
            body = scan(r, count)
        else:
            body = count * record_size
        return SECTION_PREAMBLE_SIZE + body, count

    return SectionCodec(kind=kind, parse=parse, measure=measure)


SECTIONS: dict[SectionKind, SectionCodec] = {
    SectionKind.INFO: SectionCodec(SectionKind.INFO, parse_info),
    SectionKind.FRAMES: _record_section(SectionKind.FRAMES, _parse_frame, record_size=FRAME_SIZE),
    SectionKind.NOTES: _record_section(SectionKind.NOTES, _parse_note, scan=_scan_notes),
    SectionKind.WALLS: _record_section(SectionKind.WALLS, _parse_wall, record_size=WALL_SIZE),
    SectionKind.HEIGHTS: _record_section(SectionKind.HEIGHTS, _parse_height, record_size=HEIGHT_SIZE),
    SectionKind.PAUSES: _record_section(SectionKind.PAUSES, _parse_pause, record_size=PAUSE_SIZE),
}
