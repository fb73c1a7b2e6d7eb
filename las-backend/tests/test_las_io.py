import io

import laspy
import numpy as np
import pytest

from app.crs import resolve_crs
from app.crs.errors import TruncatedVlrError, UnreadableGeotiffCrs
from lasvlr.las_io import read_las_source, read_las_vlrs
from tests.test_geotiff import build_directory, build_doubles

UTM32N_WKT = (
    'PROJCS["WGS 84 / UTM zone 32N",GEOGCS["WGS 84",DATUM["WGS_1984",'
    'SPHEROID["WGS 84",6378137,298.257223563]],PRIMEM["Greenwich",0],'
    'UNIT["degree",0.0174532925199433]],PROJECTION["Transverse_Mercator"],'
    'UNIT["metre",1],AUTHORITY["EPSG","32632"]]'
)


def write_las(path, vlrs, wkt_bit=False, version="1.2", point_format=3):
    """Write a tiny LAS file carrying the given (user_id, record_id, data) VLRs."""
    header = laspy.LasHeader(point_format=point_format, version=version)
    header.offsets = np.zeros(3)
    header.scales = np.array([0.01, 0.01, 0.01])
    for user_id, record_id, data in vlrs:
        header.vlrs.append(laspy.VLR(user_id=user_id, record_id=record_id, record_data=data))
    header.global_encoding.wkt = wkt_bit
    las = laspy.LasData(header)
    las.x = np.array([1.0, 2.0, 3.0])
    las.y = np.array([4.0, 5.0, 6.0])
    las.z = np.array([7.0, 8.0, 9.0])
    las.write(str(path))
    return path


def write_geotiff_las(path):
    directory = build_directory([(1024, 0, 1, 1), (3072, 0, 1, 26917), (4096, 0, 1, 5703), (2057, 34736, 1, 0)])
    return write_las(
        path,
        [
            ("LASF_Projection", 34735, directory),
            ("LASF_Projection", 34736, build_doubles(298.257223563)),
        ],
    )


def write_wkt_las(path, wkt_bit=True):
    return write_las(
        path,
        [("LASF_Projection", 2112, UTM32N_WKT.encode("utf-8"))],
        wkt_bit=wkt_bit,
        version="1.4",
        point_format=6,
    )


def test_read_geotiff_las(tmp_path):
    p = write_geotiff_las(tmp_path / "geotiff.las")
    src = read_las_vlrs(str(p))
    assert src.has_wkt_crs is False
    assert {v.record_id for v in src.vlrs} >= {34735, 34736}
    assert resolve_crs(src.vlrs, src.has_wkt_crs) == (26917, 5703)


def test_read_wkt_las(tmp_path):
    p = write_wkt_las(tmp_path / "wkt.las")
    src = read_las_vlrs(str(p))
    assert src.has_wkt_crs is True
    assert resolve_crs(src.vlrs, src.has_wkt_crs) == (32632, None)


def test_read_from_stream(tmp_path):
    p = write_geotiff_las(tmp_path / "geotiff.las")
    src = read_las_source(io.BytesIO(p.read_bytes()))
    assert resolve_crs(src.vlrs) == (26917, 5703)


def test_geokey_directory_is_read_as_stored(tmp_path):
    # declares three keys but carries two
    directory = build_directory([(1024, 0, 1, 2), (2048, 0, 1, 4326)], count=3)
    p = write_las(tmp_path / "short.las", [("LASF_Projection", 34735, directory)])
    src = read_las_vlrs(str(p))
    stored = [v.data for v in src.vlrs if v.record_id == 34735]
    assert stored == [directory]
    with pytest.raises(TruncatedVlrError):
        resolve_crs(src.vlrs, src.has_wkt_crs)


def test_entries_past_declared_count_are_ignored(tmp_path):
    directory = build_directory([(1024, 0, 1, 2), (2048, 0, 1, 4326)], count=1)
    p = write_las(tmp_path / "extra.las", [("LASF_Projection", 34735, directory)])
    src = read_las_vlrs(str(p))
    with pytest.raises(UnreadableGeotiffCrs):
        resolve_crs(src.vlrs, src.has_wkt_crs)
