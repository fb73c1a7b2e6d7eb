from __future__ import annotations

from typing import List

from lasvlr.vlr import CrsVlrSlots


def check_wkt_flag(header_has_wkt_crs: bool, slots: CrsVlrSlots) -> List[dict]:
    """Compare the header's global-encoding WKT bit to the projection VLRs found.

    The VLRs are authoritative; a disagreement is only ever a warning and
    never changes which record gets decoded.

    Returns a list of issue dicts (empty when consistent).
    """
    issues: List[dict] = []
    found_wkt = slots.wkt is not None

    if found_wkt and not header_has_wkt_crs:
        issues.append(
            {
                "field": "global_encoding.wkt",
                "observed_header": False,
                "observed_vlrs": True,
                "severity": "warning",
                "message": "WKT CRS VLR found, but header says it does not exist",
            }
        )
    elif not found_wkt and header_has_wkt_crs:
        issues.append(
            {
                "field": "global_encoding.wkt",
                "observed_header": True,
                "observed_vlrs": False,
                "severity": "warning",
                "message": "No WKT CRS VLR found but header says it exists",
            }
        )

    return issues
