"""GeoTIFF key directory decoding (LASF_Projection records 34735/34736/34737).

The directory record is an 8-byte header followed by 8-byte key entries, all
little-endian u16. A key's value is either inline (location 0) or points into
the GeoDoubleParams (34736) or GeoAsciiParams (34737) record.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import TruncatedVlrError, UndefinedDataForGeoTiffKey, UnreadableGeotiffCrs

INLINE_LOCATION = 0
DOUBLES_LOCATION = 34736
ASCII_LOCATION = 34737

_U16 = struct.Struct("<H")
_F64 = struct.Struct("<d")
_KEY = struct.Struct("<4H")


class ByteCursor:
    """Bounds-checked little-endian reader over an in-memory payload.

    Offsets come from file content, so every read is checked and a short read
    raises TruncatedVlrError instead of returning partial data.
    """

    def __init__(self, data: bytes, pos: int = 0) -> None:
        self.data = data
        self.pos = 0
        self.seek(pos)

    def seek(self, pos: int) -> None:
        # Seeking past the end is allowed; the next read fails.
        if pos < 0:
            raise ValueError("negative seek position")
        self.pos = pos

    def read(self, n: int) -> bytes:
        if self.pos + n > len(self.data):
            raise TruncatedVlrError(n, self.pos, len(self.data))
        chunk = self.data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def read_u16(self) -> int:
        return _U16.unpack(self.read(_U16.size))[0]

    def read_f64(self) -> float:
        return _F64.unpack(self.read(_F64.size))[0]

    def read_key(self) -> Tuple[int, int, int, int]:
        return _KEY.unpack(self.read(_KEY.size))


# -----------------------------
# Decoded values
# -----------------------------

@dataclass(frozen=True)
class Numeric:
    value: int

    def to_jsonable(self) -> Dict[str, Any]:
        return {"kind": "numeric", "value": self.value}


@dataclass(frozen=True)
class Text:
    value: str

    def to_jsonable(self) -> Dict[str, Any]:
        return {"kind": "text", "value": self.value}


@dataclass(frozen=True)
class Doubles:
    values: Tuple[float, ...]

    def to_jsonable(self) -> Dict[str, Any]:
        return {"kind": "doubles", "value": list(self.values)}


GeoTiffValue = Union[Numeric, Text, Doubles]


@dataclass(frozen=True)
class RawGeoKey:
    id: int
    location: int
    count: int
    value_offset: int


@dataclass(frozen=True)
class GeoKeyEntry:
    id: int
    value: GeoTiffValue


@dataclass
class GeoKeyDirectory:
    version: int
    key_revision: int
    minor_revision: int
    number_of_keys: int
    entries: List[GeoKeyEntry] = field(default_factory=list)

    # Header plus declared entries, in bytes
    @property
    def declared_size(self) -> int:
        return 8 + 8 * self.number_of_keys


def resolve_key_value(
    key: RawGeoKey,
    doubles: Optional[bytes] = None,
    ascii: Optional[bytes] = None,
) -> GeoTiffValue:
    """Decode one key's value from its location tag and the auxiliary records."""
    if key.location == INLINE_LOCATION:
        return Numeric(key.value_offset)

    if key.location == DOUBLES_LOCATION:
        if doubles is None:
            raise UnreadableGeotiffCrs("GeoTIFF key references a missing GeoDoubleParams vlr")
        # value_offset is an index into the array of doubles, not a byte offset
        cur = ByteCursor(doubles, key.value_offset * _F64.size)
        return Doubles(tuple(cur.read_f64() for _ in range(key.count)))

    if key.location == ASCII_LOCATION:
        if ascii is None:
            raise UnreadableGeotiffCrs("GeoTIFF key references a missing GeoAsciiParams vlr")
        cur = ByteCursor(ascii, key.value_offset)
        # one byte per character, no multi-byte decoding
        return Text(cur.read(key.count).decode("latin-1"))

    raise UndefinedDataForGeoTiffKey(key.id)


def decode_key_directory(
    directory: bytes,
    doubles: Optional[bytes] = None,
    ascii: Optional[bytes] = None,
) -> GeoKeyDirectory:
    """Parse a GeoKeyDirectory payload and resolve every entry's value.

    Exactly ``number_of_keys`` entries are read; any trailing bytes are left
    alone. Entries keep their on-disk order and each one is resolved as soon as
    it is read, so the first bad entry decides the error.
    """
    cur = ByteCursor(directory)
    out = GeoKeyDirectory(
        version=cur.read_u16(),  # always 1
        key_revision=cur.read_u16(),  # always 1
        minor_revision=cur.read_u16(),  # always 0
        number_of_keys=cur.read_u16(),
    )
    for _ in range(out.number_of_keys):
        key = RawGeoKey(*cur.read_key())
        out.entries.append(GeoKeyEntry(key.id, resolve_key_value(key, doubles, ascii)))
    return out


__all__ = [
    "ByteCursor",
    "Numeric",
    "Text",
    "Doubles",
    "GeoTiffValue",
    "RawGeoKey",
    "GeoKeyEntry",
    "GeoKeyDirectory",
    "resolve_key_value",
    "decode_key_directory",
    "INLINE_LOCATION",
    "DOUBLES_LOCATION",
    "ASCII_LOCATION",
]
