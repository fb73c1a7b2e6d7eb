from __future__ import annotations

from typing import List

from app.crs.geotiff import GeoKeyDirectory

EXPECTED_VERSION = (1, 1, 0)


def sanity_key_directory(directory: GeoKeyDirectory, payload_len: int) -> List[str]:
    """Non-fatal notes about a decoded GeoKeyDirectory.

    The decoder never validates the version fields or trailing bytes; this
    only reports them so a caller can see why a file looks odd.
    """
    notes: List[str] = []

    version = (directory.version, directory.key_revision, directory.minor_revision)
    if version != EXPECTED_VERSION:
        notes.append(
            f"Unexpected key directory version {'.'.join(map(str, version))} (expected 1.1.0)"
        )

    extra = payload_len - directory.declared_size
    if extra > 0:
        notes.append(
            f"{extra} trailing bytes after {directory.number_of_keys} declared keys"
        )

    ids = [e.id for e in directory.entries]
    if len(set(ids)) != len(ids):
        notes.append("Duplicate GeoKey ids; the last one wins")

    return notes
