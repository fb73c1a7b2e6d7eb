from __future__ import annotations

from .epsg_catalog import EpsgResult, MAX_EPSG_CODE
from .errors import UnreadableWktCrs

# The authority code is a 4 or 5 digit number a couple of bytes before the
# closing brackets, e.g. AUTHORITY["EPSG","4326"]]
_MAX_TAIL_INDEX = 7

_DIGITS = range(0x30, 0x3A)


def wkt_epsg(data: bytes) -> EpsgResult:
    """Find the EPSG code at the end of a WKT coordinate system string.

    Bytes are scanned from the end; the first run of ASCII digits is the code.
    More than eight trailing bytes inspected without the run ending is an
    error. NUL terminators are not part of the text and are skipped before
    counting. WKT never carries a separate vertical code.
    """
    code = 0
    power = 0
    started = False
    for i, byte in enumerate(reversed(bytes(data).rstrip(b"\0"))):
        if byte in _DIGITS:
            started = True
            code += (byte - 0x30) * 10 ** power
            power += 1
        elif started:
            break
        if i > _MAX_TAIL_INDEX:
            raise UnreadableWktCrs()
    if code > MAX_EPSG_CODE:
        raise UnreadableWktCrs(f"WKT authority code {code} does not fit an EPSG code")
    return EpsgResult(code, None)


__all__ = ["wkt_epsg"]
