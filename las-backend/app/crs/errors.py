from __future__ import annotations

from typing import Any, Dict


class CrsError(Exception):
    """Base class for every failure of the EPSG extraction.

    Each subclass has a stable ``code`` used by the API and the batch scanner.
    """

    code = "crs_error"
    message = "CRS could not be resolved"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    def payload(self) -> Dict[str, Any]:
        return {}


class NoCrs(CrsError):
    code = "no_crs"
    message = "No crs vlrs"


class UserDefinedCrs(CrsError):
    code = "user_defined_crs"
    message = "User defined crs, not implemented"


class UnreadableWktCrs(CrsError):
    code = "unreadable_wkt_crs"
    message = "WKT vlr found, but not able to parse"


class UnreadableGeotiffCrs(CrsError):
    code = "unreadable_geotiff_crs"
    message = "GeoTIFF vlr found, but not able to parse"


class UndefinedDataForGeoTiffKey(CrsError):
    code = "undefined_data_for_geotiff_key"

    def __init__(self, key_id: int) -> None:
        self.key_id = key_id
        super().__init__(f"Invalid data for geotiff key {key_id}")

    def payload(self) -> Dict[str, Any]:
        return {"key_id": self.key_id}


class UnimplementedForGeoTiffAsciiAndStringData(CrsError):
    code = "unimplemented_for_geotiff_ascii_and_string_data"

    def __init__(self, value: Any) -> None:
        # value is the offending GeoTiffValue
        self.value = value
        super().__init__(
            f"The crs parser does not handle geotiff ascii and string defined CRS's: {value!r}"
        )

    def payload(self) -> Dict[str, Any]:
        to_jsonable = getattr(self.value, "to_jsonable", None)
        return {"value": to_jsonable() if to_jsonable else repr(self.value)}


class TruncatedVlrError(CrsError, EOFError):
    """A read ran past the end of a VLR payload."""

    code = "truncated_vlr"

    def __init__(self, wanted: int, offset: int, size: int) -> None:
        self.wanted = wanted
        self.offset = offset
        self.size = size
        super().__init__(
            f"Read of {wanted} bytes at offset {offset} runs past end of {size}-byte payload"
        )

    def payload(self) -> Dict[str, Any]:
        return {"wanted": self.wanted, "offset": self.offset, "size": self.size}


__all__ = [
    "CrsError",
    "NoCrs",
    "UserDefinedCrs",
    "UnreadableWktCrs",
    "UnreadableGeotiffCrs",
    "UndefinedDataForGeoTiffKey",
    "UnimplementedForGeoTiffAsciiAndStringData",
    "TruncatedVlrError",
]
