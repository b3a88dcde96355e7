"""Exceptions raised while decoding a BSOR replay."""

from __future__ import annotations


class ReplayError(Exception):
    """Base class for every replay decoding failure."""


class InvalidFormatError(ReplayError, ValueError):
    """Bad magic, unexpected section tag or an impossible record count."""


class UnsupportedVersionError(ReplayError, ValueError):
    """The header carries a format version this package cannot read."""

    def __init__(self, version: int) -> None:
        super().__init__(f"Unsupported BSOR version: {version}")
        self.version = version


class ReplayIOError(ReplayError):
    """Short read, seek failure or an error from the underlying stream."""


class DecodingError(ReplayError, ValueError):
    """A field was read in full but could not be converted to its value."""
