from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

PROJECTION_USER_ID = "lasf_projection"

WKT_CRS_RECORD_ID = 2112
GEOKEY_DIRECTORY_RECORD_ID = 34735
GEOKEY_DOUBLES_RECORD_ID = 34736
GEOKEY_ASCII_RECORD_ID = 34737

# record_id -> slot attribute on CrsVlrSlots
_SLOTS = {
    WKT_CRS_RECORD_ID: "wkt",
    GEOKEY_DIRECTORY_RECORD_ID: "geokey_directory",
    GEOKEY_DOUBLES_RECORD_ID: "geokey_doubles",
    GEOKEY_ASCII_RECORD_ID: "geokey_ascii",
}


@dataclass(frozen=True)
class VlrRecord:
    user_id: str
    record_id: int
    data: bytes


@dataclass
class CrsVlrSlots:
    wkt: Optional[bytes] = None
    geokey_directory: Optional[bytes] = None
    geokey_doubles: Optional[bytes] = None
    geokey_ascii: Optional[bytes] = None


def select_crs_vlrs(vlrs: Iterable[VlrRecord]) -> CrsVlrSlots:
    """Pick the projection VLRs out of a file's VLR list.

    The user id is matched case-insensitively. When several records share a
    record id the last one wins.
    """
    slots = CrsVlrSlots()
    for vlr in vlrs:
        if vlr.user_id.lower() != PROJECTION_USER_ID:
            continue
        attr = _SLOTS.get(vlr.record_id)
        if attr is None:
            continue
        if getattr(slots, attr) is not None:
            logger.debug("duplicate projection vlr, keeping the last one", extra={"record_id": vlr.record_id})
        setattr(slots, attr, bytes(vlr.data))
    return slots


__all__ = [
    "VlrRecord",
    "CrsVlrSlots",
    "select_crs_vlrs",
    "PROJECTION_USER_ID",
    "WKT_CRS_RECORD_ID",
    "GEOKEY_DIRECTORY_RECORD_ID",
    "GEOKEY_DOUBLES_RECORD_ID",
    "GEOKEY_ASCII_RECORD_ID",
]
