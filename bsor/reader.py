"""Low-level binary reader for BSOR streams.

All values are little-endian. Strings are an i32 byte length followed by that
many UTF-8 bytes.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

from .errors import DecodingError, ReplayIOError

_U8 = struct.Struct("<B")
_I32 = struct.Struct("<i")
_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")
_VEC3 = struct.Struct("<3f")
_VEC4 = struct.Struct("<4f")


class _Reader:
    """Exact-size reads over a caller-owned binary stream.

    Seeking helpers are only used by the indexer and the materializer; the
    eager loader needs nothing beyond ``read``.
    """

    __slots__ = ("_f",)

    def __init__(self, f: BinaryIO) -> None:
        self._f = f

    # -- primitive reads --

    def read_bytes(self, n: int) -> bytes:
        try:
            data = self._f.read(n)
        except OSError as exc:
            raise ReplayIOError(f"Read of {n} bytes failed: {exc}") from exc
        if len(data) != n:
            raise ReplayIOError(f"Unexpected end of stream: expected {n} bytes, got {len(data)}")
        return data

    def read_struct(self, layout: struct.Struct) -> tuple:
        return layout.unpack(self.read_bytes(layout.size))

    def read_uint8(self) -> int:
        return self.read_struct(_U8)[0]

    def read_bool(self) -> bool:
        return self.read_uint8() == 1

    def read_int32(self) -> int:
        return self.read_struct(_I32)[0]

    def read_uint64(self) -> int:
        return self.read_struct(_U64)[0]

    def read_float(self) -> float:
        return self.read_struct(_F32)[0]

    def read_vec3(self) -> tuple[float, float, float]:
        return self.read_struct(_VEC3)

    def read_vec4(self) -> tuple[float, float, float, float]:
        return self.read_struct(_VEC4)

    # -- text --

    def read_text(self) -> str:
        length = self.read_int32()
        if length < 0:
            raise DecodingError(f"Negative string length: {length}")
        if length == 0:
            return ""
        data = self.read_bytes(length)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodingError(f"Invalid UTF-8 string: {exc}") from exc

    # -- positioning --

    def tell(self) -> int:
        try:
            return self._f.tell()
        except OSError as exc:
            raise ReplayIOError(f"Cannot get stream position: {exc}") from exc

    def seek(self, pos: int, whence: int = io.SEEK_SET) -> int:
        try:
            return self._f.seek(pos, whence)
        except (OSError, ValueError) as exc:
            raise ReplayIOError(f"Cannot seek to {pos} (whence={whence}): {exc}") from exc

    def skip(self, n: int) -> None:
        """Move forward ``n`` bytes without reading them."""
        if n:
            self.seek(n, io.SEEK_CUR)

    def size(self) -> int:
        """Total stream length; the current position is preserved."""
        pos = self.tell()
        end = self.seek(0, io.SEEK_END)
        self.seek(pos)
        return end


def require_seekable(f: BinaryIO) -> None:
    seekable = getattr(f, "seekable", None)
    if seekable is None or not seekable():
        raise ReplayIOError("Indexed access requires a seekable stream")
