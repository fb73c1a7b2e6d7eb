from __future__ import annotations

from typing import Any, Dict, List

from .epsg_catalog import GT_MODEL_TYPE, key_name, model_type_label
from .geotiff import GeoKeyDirectory, Numeric


def pack_entries(directory: GeoKeyDirectory) -> List[Dict[str, Any]]:
    out = []
    for e in directory.entries:
        d = e.value.to_jsonable()
        d["id"] = e.id
        d["name"] = key_name(e.id)
        if e.id == GT_MODEL_TYPE and isinstance(e.value, Numeric):
            d["label"] = model_type_label(e.value.value)
        out.append(d)
    return out


def pack_header(directory: GeoKeyDirectory) -> Dict[str, int]:
    return {
        "version": directory.version,
        "key_revision": directory.key_revision,
        "minor_revision": directory.minor_revision,
        "number_of_keys": directory.number_of_keys,
    }


__all__ = ["pack_entries", "pack_header"]
