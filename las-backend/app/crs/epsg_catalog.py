from __future__ import annotations

from typing import Dict, NamedTuple, Optional

# Minimal GeoKey catalog pieces we need


class EpsgResult(NamedTuple):
    """Horizontal EPSG code and the optional vertical one."""

    horizontal: int
    vertical: Optional[int] = None


MAX_EPSG_CODE = 0xFFFF

# GeoKey ids, grouped by the GeoTIFF key ranges:
# [1024, 2047] configuration, [2048, 3071] geodetic, [3072, 4095] projected,
# [4096, 5119] vertical
GT_MODEL_TYPE = 1024
GT_RASTER_TYPE = 1025
GT_CITATION = 1026
GEODETIC_CRS = 2048
GEOG_CITATION = 2049
GEODETIC_DATUM = 2050
GEOG_LINEAR_UNITS = 2052
GEOG_ANGULAR_UNITS = 2054
PROJECTED_CRS = 3072
PROJ_CITATION = 3073
PROJECTION = 3074
PROJ_LINEAR_UNITS = 3076
VERTICAL_CRS = 4096
VERTICAL_CITATION = 4097
VERTICAL_DATUM = 4098
VERTICAL_UNITS = 4099

KEY_NAMES: Dict[int, str] = {
    GT_MODEL_TYPE: "GTModelTypeGeoKey",
    GT_RASTER_TYPE: "GTRasterTypeGeoKey",
    GT_CITATION: "GTCitationGeoKey",
    GEODETIC_CRS: "GeodeticCRSGeoKey",
    GEOG_CITATION: "GeodeticCitationGeoKey",
    GEODETIC_DATUM: "GeodeticDatumGeoKey",
    GEOG_LINEAR_UNITS: "GeogLinearUnitsGeoKey",
    GEOG_ANGULAR_UNITS: "GeogAngularUnitsGeoKey",
    PROJECTED_CRS: "ProjectedCRSGeoKey",
    PROJ_CITATION: "ProjectedCitationGeoKey",
    PROJECTION: "ProjectionGeoKey",
    PROJ_LINEAR_UNITS: "ProjLinearUnitsGeoKey",
    VERTICAL_CRS: "VerticalGeoKey",
    VERTICAL_CITATION: "VerticalCitationGeoKey",
    VERTICAL_DATUM: "VerticalDatumGeoKey",
    VERTICAL_UNITS: "VerticalUnitsGeoKey",
}

# GTModelTypeGeoKey values
MODEL_UNDEFINED = 0
MODEL_PROJECTED = 1
MODEL_GEOGRAPHIC = 2
MODEL_GEOGRAPHIC_VERTICAL = 3
MODEL_USER_DEFINED = 32767

MODEL_TYPES: Dict[int, str] = {
    MODEL_UNDEFINED: "undefined",
    MODEL_PROJECTED: "projected",
    MODEL_GEOGRAPHIC: "geographic",
    MODEL_GEOGRAPHIC_VERTICAL: "geographic + vertical",
    MODEL_USER_DEFINED: "user defined",
}

SUPPORTED_MODEL_TYPES = (MODEL_PROJECTED, MODEL_GEOGRAPHIC, MODEL_GEOGRAPHIC_VERTICAL)


def key_name(key_id: int) -> str:
    name = KEY_NAMES.get(key_id)
    if name:
        return name
    if key_id >= 32768:
        return f"PrivateGeoKey({key_id})"
    return f"GeoKey({key_id})"


def model_type_label(value: int) -> str:
    return MODEL_TYPES.get(value, f"unknown ({value})")


__all__ = [
    "EpsgResult",
    "MAX_EPSG_CODE",
    "KEY_NAMES",
    "MODEL_TYPES",
    "SUPPORTED_MODEL_TYPES",
    "key_name",
    "model_type_label",
]
