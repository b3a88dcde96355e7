"""Eager loader tests — full decode, round trip and error propagation."""

from __future__ import annotations

import io
import struct

import pytest

from bsor import (
    DecodingError,
    InvalidFormatError,
    ReplayError,
    ReplayIOError,
    UnsupportedVersionError,
    load,
    parse,
)
from bsor.types import NoteEventType, Replay, SectionKind

from _builders import (
    encode_header,
    encode_info,
    encode_replay,
    encode_section,
    make_info,
    make_note,
)


class _ForwardOnly(io.RawIOBase):
    """Readable stream that refuses to seek."""

    def __init__(self, data: bytes) -> None:
        self._buf = io.BytesIO(data)

    def readable(self):
        return True

    def readinto(self, b):
        chunk = self._buf.read(len(b))
        b[: len(chunk)] = chunk
        return len(chunk)

    def seekable(self):
        return False


class TestLoad:
    def test_returns_replay(self, replay_stream):
        assert isinstance(load(replay_stream), Replay)

    def test_matches_source(self, replay, replay_stream):
        result = load(replay_stream)
        assert result.version == replay.version
        assert result.info == replay.info
        assert result.frames == replay.frames
        assert result.notes == replay.notes
        assert result.walls == replay.walls
        assert result.heights == replay.heights
        assert result.pauses == replay.pauses

    def test_round_trip_bytes(self, replay_bytes):
        assert encode_replay(load(io.BytesIO(replay_bytes))) == replay_bytes

    def test_consumes_whole_stream(self, replay_bytes, replay_stream):
        load(replay_stream)
        assert replay_stream.tell() == len(replay_bytes)

    def test_forward_only_stream(self, replay, replay_bytes):
        assert load(_ForwardOnly(replay_bytes)) == replay

    def test_empty_sections(self):
        data = encode_header() + encode_info(make_info()) + b"".join(
            encode_section(kind, []) for kind in list(SectionKind)[1:]
        )
        result = load(io.BytesIO(data))
        assert result.frames == []
        assert result.notes == []
        assert result.pauses == []

    def test_cut_info_invariant(self, replay_stream):
        for note in load(replay_stream).notes:
            if note.event_type in (NoteEventType.GOOD, NoteEventType.BAD):
                assert note.cut_info is not None
            else:
                assert note.cut_info is None


class TestParseFile:
    def test_parse_path(self, replay, replay_file):
        assert parse(replay_file) == replay

    def test_parse_str_path(self, replay, replay_file):
        assert parse(str(replay_file)) == replay


class TestErrors:
    def test_unsupported_version(self, replay_bytes):
        data = bytearray(replay_bytes)
        data[4] = 2
        with pytest.raises(UnsupportedVersionError) as excinfo:
            load(io.BytesIO(bytes(data)))
        assert excinfo.value.version == 2

    def test_bad_magic(self):
        with pytest.raises(InvalidFormatError):
            load(io.BytesIO(struct.pack("<iB", 0x12345678, 1) + b"\x00" * 32))

    def test_corrupt_notes_tag(self, replay, replay_bytes):
        notes_offset = (
            len(encode_header())
            + len(encode_info(replay.info))
            + len(encode_section(SectionKind.FRAMES, replay.frames))
        )
        data = bytearray(replay_bytes)
        assert data[notes_offset] == SectionKind.NOTES
        data[notes_offset] = 7
        stream = io.BytesIO(bytes(data))
        with pytest.raises(InvalidFormatError, match="NOTES"):
            load(stream)
        assert stream.tell() == notes_offset + 1

    def test_truncated(self, replay_bytes):
        with pytest.raises(ReplayIOError):
            load(io.BytesIO(replay_bytes[:-3]))

    def test_empty_file(self):
        with pytest.raises(ReplayIOError):
            load(io.BytesIO(b""))

    def test_bad_timestamp(self):
        data = encode_header() + encode_info(make_info(), timestamp="yesterday")
        with pytest.raises(DecodingError):
            load(io.BytesIO(data))

    def test_invalid_utf8_in_info(self):
        data = bytearray(encode_header() + encode_info(make_info()))
        # first byte of the first string
        data[5 + 1 + 4] = 0xFF
        with pytest.raises(DecodingError):
            load(io.BytesIO(bytes(data)))

    def test_all_errors_share_base(self):
        for exc in (InvalidFormatError, UnsupportedVersionError, ReplayIOError, DecodingError):
            assert issubclass(exc, ReplayError)

    def test_missing_trailing_section(self, replay):
        data = (
            encode_header()
            + encode_info(replay.info)
            + encode_section(SectionKind.FRAMES, replay.frames)
            + encode_section(SectionKind.NOTES, [make_note()])
        )
        with pytest.raises(ReplayIOError):
            load(io.BytesIO(data))
