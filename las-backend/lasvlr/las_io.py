from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, List, Union

import laspy

from .vlr import VlrRecord

logger = logging.getLogger(__name__)

# header_size, offset_to_point_data, number_of_vlrs
_PUBLIC_HEADER_OFFSET = 94
_PUBLIC_HEADER = struct.Struct("<HII")
# reserved, user_id, record_id, record_length_after_header, description
_VLR_HEADER = struct.Struct("<H16sHH32s")
_EVLR_HEADER = struct.Struct("<H16sHQ32s")


@dataclass
class LasCrsSource:
    """What the CRS resolver needs from a LAS header."""

    vlrs: List[VlrRecord] = field(default_factory=list)
    has_wkt_crs: bool = False


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    data = stream.read(n)
    if len(data) != n:
        raise EOFError(f"LAS file ends inside a VLR (wanted {n} bytes, got {len(data)})")
    return data


def _read_records(stream: BinaryIO, count: int, layout: struct.Struct) -> List[VlrRecord]:
    # Payloads are taken as stored; laspy's known-VLR classes rewrite some of
    # them (the GeoKey directory key count) when re-serializing.
    out: List[VlrRecord] = []
    for _ in range(count):
        _, user_id, record_id, length, _ = layout.unpack(_read_exact(stream, layout.size))
        name = user_id.split(b"\0", 1)[0].decode("latin-1")
        out.append(VlrRecord(name, record_id, _read_exact(stream, length)))
    return out


def _read_stream(stream: BinaryIO) -> LasCrsSource:
    start = stream.tell()
    with laspy.open(stream, closefd=False) as reader:
        header = reader.header
        has_wkt = bool(header.global_encoding.wkt)
        evlr_start = header.start_of_first_evlr
        evlr_count = header.number_of_evlrs

    stream.seek(start + _PUBLIC_HEADER_OFFSET)
    header_size, _, vlr_count = _PUBLIC_HEADER.unpack(_read_exact(stream, _PUBLIC_HEADER.size))
    stream.seek(start + header_size)
    vlrs = _read_records(stream, vlr_count, _VLR_HEADER)
    if evlr_count:
        stream.seek(start + evlr_start)
        vlrs.extend(_read_records(stream, evlr_count, _EVLR_HEADER))
    logger.debug("read %d vlrs (wkt bit=%s)", len(vlrs), has_wkt)
    return LasCrsSource(vlrs=vlrs, has_wkt_crs=has_wkt)


def read_las_source(source: Union[str, os.PathLike, BinaryIO]) -> LasCrsSource:
    """Read the VLRs, EVLRs and the global-encoding WKT bit of a LAS/LAZ file.

    laspy validates the header; the VLR payloads are then read straight from
    the file. Only the header area is read; points are never decompressed.
    Streams must be seekable.
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return _read_stream(f)
    return _read_stream(source)


def read_las_vlrs(path: str) -> LasCrsSource:
    return read_las_source(path)


__all__ = ["LasCrsSource", "read_las_vlrs", "read_las_source"]
