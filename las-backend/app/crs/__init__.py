"""EPSG extraction from LAS projection VLRs.

Modules:
 - wkt: trailing authority code scan of the WKT CRS record (2112)
 - geotiff: GeoKeyDirectory (34735) decoding with double/ASCII params (34736/34737)
 - resolver: record selection, format priority and GeoKey interpretation
 - epsg_catalog: GeoKey ids, model types and the EpsgResult tuple
 - errors: CrsError hierarchy
 - diagnostics: JSON packing of decoded directories
"""

from .epsg_catalog import EpsgResult
from .errors import CrsError
from .resolver import resolve_crs

__all__ = [
    "EpsgResult",
    "CrsError",
    "resolve_crs",
]
