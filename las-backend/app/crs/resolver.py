from __future__ import annotations

import logging
from typing import Iterable, Optional

from lasvlr.vlr import CrsVlrSlots, VlrRecord, select_crs_vlrs
from qc.consistency import check_wkt_flag

from .epsg_catalog import (
    EpsgResult,
    GEODETIC_CRS,
    GT_MODEL_TYPE,
    MODEL_UNDEFINED,
    MODEL_USER_DEFINED,
    PROJECTED_CRS,
    SUPPORTED_MODEL_TYPES,
    VERTICAL_CRS,
)
from .errors import (
    NoCrs,
    UndefinedDataForGeoTiffKey,
    UnimplementedForGeoTiffAsciiAndStringData,
    UnreadableGeotiffCrs,
    UserDefinedCrs,
)
from .geotiff import GeoKeyEntry, Numeric, decode_key_directory
from .wkt import wkt_epsg

logger = logging.getLogger(__name__)


def _warn_header_mismatch(header_has_wkt_crs: bool, slots: CrsVlrSlots) -> None:
    for issue in check_wkt_flag(header_has_wkt_crs, slots):
        logger.warning(issue["message"], extra={"issue": issue["field"]})


def interpret_geokeys(entries: Iterable[GeoKeyEntry]) -> EpsgResult:
    """Pick the EPSG codes out of decoded GeoKey entries.

    3072 and 2048 should not co-exist but may both be combined with 4096.
    Entries are taken in directory order, so whichever of 2048/3072 comes last
    is the horizontal code.
    """
    horizontal: Optional[int] = None
    vertical: Optional[int] = None

    for entry in entries:
        if entry.id == GT_MODEL_TYPE:
            value = entry.value
            if not isinstance(value, Numeric):
                raise UnimplementedForGeoTiffAsciiAndStringData(value)
            if value.value == MODEL_UNDEFINED:
                raise UnreadableGeotiffCrs("GeoTIFF model type is undefined")
            if value.value == MODEL_USER_DEFINED:
                raise UserDefinedCrs()
            if value.value not in SUPPORTED_MODEL_TYPES:
                raise UnimplementedForGeoTiffAsciiAndStringData(value)
        elif entry.id in (PROJECTED_CRS, GEODETIC_CRS):
            if not isinstance(entry.value, Numeric):
                raise UndefinedDataForGeoTiffKey(entry.id)
            horizontal = entry.value.value
        elif entry.id == VERTICAL_CRS:
            if not isinstance(entry.value, Numeric):
                raise UndefinedDataForGeoTiffKey(entry.id)
            vertical = entry.value.value
        # the rest are descriptions and units

    if horizontal is None:
        raise UnreadableGeotiffCrs("GeoTIFF directory has no horizontal CRS key")
    return EpsgResult(horizontal, vertical)


def geotiff_epsg(slots: CrsVlrSlots) -> EpsgResult:
    if slots.geokey_directory is None:
        raise UnreadableGeotiffCrs("GeoKeyDirectory vlr is missing")
    directory = decode_key_directory(
        slots.geokey_directory, slots.geokey_doubles, slots.geokey_ascii
    )
    return interpret_geokeys(directory.entries)


def resolve_slots(slots: CrsVlrSlots, header_has_wkt_crs: bool) -> EpsgResult:
    """Resolve already-selected projection payloads.

    A WKT record takes priority; the GeoTIFF records are then not looked at.
    """
    _warn_header_mismatch(header_has_wkt_crs, slots)
    if slots.wkt is not None:
        return wkt_epsg(slots.wkt)
    if slots.geokey_directory is not None:
        return geotiff_epsg(slots)
    raise NoCrs()


def resolve_crs(vlrs: Iterable[VlrRecord], header_has_wkt_crs: bool = False) -> EpsgResult:
    """Return the (horizontal, vertical) EPSG codes carried by a file's VLRs.

    Raises a CrsError subclass when no code can be extracted.
    """
    return resolve_slots(select_crs_vlrs(vlrs), header_has_wkt_crs)


def crs_source(slots: CrsVlrSlots) -> Optional[str]:
    if slots.wkt is not None:
        return "wkt"
    if slots.geokey_directory is not None:
        return "geotiff"
    return None


__all__ = [
    "resolve_crs",
    "resolve_slots",
    "geotiff_epsg",
    "interpret_geokeys",
    "crs_source",
]
