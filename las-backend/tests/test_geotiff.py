import struct

import pytest

from app.crs.errors import TruncatedVlrError, UndefinedDataForGeoTiffKey, UnreadableGeotiffCrs
from app.crs.geotiff import (
    ByteCursor,
    Doubles,
    Numeric,
    RawGeoKey,
    Text,
    decode_key_directory,
    resolve_key_value,
)


def build_directory(keys, version=(1, 1, 0), count=None):
    """GeoKeyDirectory payload from (id, location, count, value_offset) tuples."""
    n = len(keys) if count is None else count
    out = struct.pack("<4H", *version, n)
    for k in keys:
        out += struct.pack("<4H", *k)
    return out


def build_doubles(*values):
    return struct.pack(f"<{len(values)}d", *values)


def test_byte_cursor_short_read_raises():
    cur = ByteCursor(b"\x01\x00\x02")
    assert cur.read_u16() == 1
    with pytest.raises(TruncatedVlrError) as ei:
        cur.read_u16()
    assert ei.value.offset == 2 and ei.value.size == 3
    assert isinstance(ei.value, EOFError)


def test_inline_value_ignores_count():
    assert resolve_key_value(RawGeoKey(3072, 0, 7, 32632)) == Numeric(32632)


def test_double_indirection_uses_index_not_byte_offset():
    doubles = build_doubles(1.0, 12.5, -3.25)
    assert resolve_key_value(RawGeoKey(2057, 34736, 1, 0), doubles=doubles) == Doubles((1.0,))
    assert resolve_key_value(RawGeoKey(2057, 34736, 2, 1), doubles=doubles) == Doubles((12.5, -3.25))


def test_single_double():
    v = resolve_key_value(RawGeoKey(2057, 34736, 1, 0), doubles=struct.pack("<d", 12.5))
    assert v == Doubles((12.5,))


def test_double_read_past_end_is_truncation():
    with pytest.raises(TruncatedVlrError):
        resolve_key_value(RawGeoKey(2057, 34736, 2, 0), doubles=build_doubles(1.0))
    with pytest.raises(TruncatedVlrError):
        resolve_key_value(RawGeoKey(2057, 34736, 1, 5), doubles=build_doubles(1.0))


def test_ascii_indirection_is_byte_offset():
    ascii = b"NAD83 / UTM 17N|WGS 84|"
    v = resolve_key_value(RawGeoKey(1026, 34737, 6, 16), ascii=ascii)
    assert v == Text("WGS 84")


def test_ascii_maps_bytes_one_to_one():
    v = resolve_key_value(RawGeoKey(1026, 34737, 2, 0), ascii=b"\xe9\xff")
    assert v == Text("éÿ")


def test_ascii_read_past_end_is_truncation():
    with pytest.raises(TruncatedVlrError):
        resolve_key_value(RawGeoKey(1026, 34737, 10, 0), ascii=b"short")


def test_missing_aux_buffers():
    with pytest.raises(UnreadableGeotiffCrs):
        resolve_key_value(RawGeoKey(2057, 34736, 1, 0))
    with pytest.raises(UnreadableGeotiffCrs):
        resolve_key_value(RawGeoKey(1026, 34737, 1, 0))


def test_unknown_location_tag():
    with pytest.raises(UndefinedDataForGeoTiffKey) as ei:
        resolve_key_value(RawGeoKey(3072, 1234, 1, 0))
    assert ei.value.key_id == 3072


def test_decode_directory_keeps_order_and_header():
    payload = build_directory(
        [(1024, 0, 1, 1), (1026, 34737, 4, 0), (3072, 0, 1, 26917), (2057, 34736, 1, 0)]
    )
    d = decode_key_directory(payload, build_doubles(6378137.0), b"UTM|")
    assert (d.version, d.key_revision, d.minor_revision, d.number_of_keys) == (1, 1, 0, 4)
    assert [e.id for e in d.entries] == [1024, 1026, 3072, 2057]
    assert d.entries[1].value == Text("UTM|")
    assert d.entries[2].value == Numeric(26917)
    assert d.entries[3].value == Doubles((6378137.0,))


def test_decode_directory_ignores_trailing_bytes():
    payload = build_directory([(1024, 0, 1, 2)]) + b"\x00" * 8
    d = decode_key_directory(payload)
    assert len(d.entries) == 1


def test_decode_truncated_directory():
    # declares 3 keys but carries 2
    payload = build_directory([(1024, 0, 1, 2), (2048, 0, 1, 4326)], count=3)
    with pytest.raises(TruncatedVlrError):
        decode_key_directory(payload)
    with pytest.raises(TruncatedVlrError):
        decode_key_directory(b"\x01\x00\x01\x00")
