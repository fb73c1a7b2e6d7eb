from fastapi import APIRouter, UploadFile, File, Form, HTTPException
from fastapi.responses import JSONResponse
import logging
import os
import shutil
import tempfile
from typing import Optional

from laspy.errors import LaspyException

from app.schemas import (
    CrsErrorResponse,
    EpsgResponse,
    GeoKeyOut,
    GeoKeysRequest,
    GeoKeysResponse,
    ResolveRequest,
)
from app.crs.errors import CrsError
from app.crs.geotiff import decode_key_directory
from app.crs.diagnostics import pack_entries, pack_header
from app.crs.resolver import crs_source, resolve_slots
from lasvlr.las_io import LasCrsSource, read_las_vlrs
from lasvlr.vlr import VlrRecord, select_crs_vlrs
from qc.sanity import sanity_key_directory

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_MAX_UPLOAD_BYTES = 64 * 1024 * 1024


def _max_upload_bytes() -> int:
    try:
        return int(os.getenv("LAS_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))
    except ValueError:
        return DEFAULT_MAX_UPLOAD_BYTES


def crs_error_response(err: CrsError) -> JSONResponse:
    body = CrsErrorResponse(error=err.code, detail=str(err), payload=err.payload())
    return JSONResponse(status_code=422, content=body.model_dump())


def _resolve_source(src: LasCrsSource):
    slots = select_crs_vlrs(src.vlrs)
    try:
        epsg = resolve_slots(slots, src.has_wkt_crs)
    except CrsError as e:
        logger.info("crs.unresolved", extra={"issue": e.code})
        return crs_error_response(e)
    return EpsgResponse(horizontal=epsg.horizontal, vertical=epsg.vertical, source=crs_source(slots))


def _read_source(path: str) -> LasCrsSource:
    try:
        return read_las_vlrs(path)
    except PermissionError:
        raise HTTPException(status_code=403, detail=f"Permission denied: {path}")
    except (LaspyException, ValueError, EOFError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid LAS header: {e}")


@router.post(
    "/las/crs",
    response_model=EpsgResponse,
    responses={422: {"model": CrsErrorResponse}},
)
async def las_crs(file: UploadFile = File(None), path: str = Form(None)):
    """Extract EPSG codes from the projection VLRs of a LAS/LAZ file.

    Accepts either an uploaded file (multipart) or a filesystem path provided as form field 'path'.
    Only the header and (E)VLRs are read.
    """
    if file and path:
        raise HTTPException(status_code=400, detail="Provide either 'file' or 'path', not both")
    if not file and not path:
        raise HTTPException(status_code=400, detail="No file or path provided")

    tmp_path: Optional[str] = None
    try:
        if file:
            with tempfile.NamedTemporaryFile(delete=False, suffix=os.path.splitext(file.filename or "")[1]) as tmp:
                tmp_path = tmp.name
                shutil.copyfileobj(file.file, tmp)
                size = tmp.tell()
            if size == 0:
                raise HTTPException(status_code=400, detail="Uploaded file is empty")
            if size > _max_upload_bytes():
                raise HTTPException(status_code=413, detail=f"Upload exceeds {_max_upload_bytes()} bytes")
            src = _read_source(tmp_path)
        else:
            if not os.path.exists(path):
                raise HTTPException(status_code=404, detail=f"Path not found: {path}")
            if not os.path.isfile(path):
                raise HTTPException(status_code=400, detail=f"Not a regular file: {path}")
            src = _read_source(path)
        return _resolve_source(src)
    except HTTPException:
        raise
    except Exception as e:  # broad catch to avoid opaque 500s
        logger.exception("/las/crs failed")
        return JSONResponse(status_code=500, content={"error": str(e), "type": type(e).__name__})
    finally:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)


@router.post(
    "/las/crs/resolve",
    response_model=EpsgResponse,
    responses={422: {"model": CrsErrorResponse}},
)
async def las_crs_resolve(req: ResolveRequest):
    """Resolve EPSG codes from VLRs that were already read by the caller.

    Body schema:
        {
            "vlrs": [{"user_id": "LASF_Projection", "record_id": 2112, "data": "<base64>"}],
            "has_wkt_crs": true
        }
    """
    vlrs = [VlrRecord(v.user_id, v.record_id, v.data) for v in req.vlrs]
    return _resolve_source(LasCrsSource(vlrs=vlrs, has_wkt_crs=req.has_wkt_crs))


@router.post(
    "/las/geokeys",
    response_model=GeoKeysResponse,
    responses={422: {"model": CrsErrorResponse}},
)
async def las_geokeys(req: GeoKeysRequest):
    """Decode a GeoKeyDirectory and list every key, for inspecting odd files."""
    try:
        directory = decode_key_directory(req.directory, req.doubles, req.ascii)
    except CrsError as e:
        return crs_error_response(e)
    return GeoKeysResponse(
        header=pack_header(directory),
        entries=[GeoKeyOut(**e) for e in pack_entries(directory)],
        notes=sanity_key_directory(directory, len(req.directory)),
    )
