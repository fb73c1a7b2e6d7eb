from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, List, Optional, Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator


def _b64(v: Any) -> Any:
    if isinstance(v, (bytes, bytearray)):
        return bytes(v)
    if isinstance(v, str):
        try:
            return base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"not valid base64: {e}")
    return v


class VlrIn(BaseModel):
    """One VLR as sent over the wire; ``data`` is base64."""

    user_id: str = Field(max_length=16, description="VLR user id, e.g. LASF_Projection")
    record_id: int = Field(ge=0, le=0xFFFF)
    data: bytes = Field(default=b"", description="Base64 encoded record payload")

    @field_validator("data", mode="before")
    @classmethod
    def _decode_data(cls, v: Any) -> Any:
        return _b64(v)


class ResolveRequest(BaseModel):
    vlrs: List[VlrIn] = Field(default_factory=list)
    has_wkt_crs: bool = Field(
        default=False, description="Global encoding WKT bit of the LAS header"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "vlrs": [
                    {
                        "user_id": "LASF_Projection",
                        "record_id": 2112,
                        "data": base64.b64encode(b'AUTHORITY["EPSG","4326"]]').decode("ascii"),
                    }
                ],
                "has_wkt_crs": True,
            }
        }
    )


class EpsgResponse(BaseModel):
    """Successful EPSG extraction."""

    horizontal: int = Field(ge=0, le=0xFFFF, description="Horizontal EPSG code")
    vertical: Optional[int] = Field(default=None, ge=0, le=0xFFFF, description="Vertical EPSG code")
    source: Literal["wkt", "geotiff"] = Field(description="Which projection record was decoded")


class CrsErrorResponse(BaseModel):
    error: str = Field(description="Stable error code")
    detail: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class GeoKeysRequest(BaseModel):
    directory: bytes = Field(description="Base64 GeoKeyDirectory (34735) payload")
    doubles: Optional[bytes] = Field(default=None, description="Base64 GeoDoubleParams (34736) payload")
    ascii: Optional[bytes] = Field(default=None, description="Base64 GeoAsciiParams (34737) payload")

    @field_validator("directory", "doubles", "ascii", mode="before")
    @classmethod
    def _decode_payloads(cls, v: Any) -> Any:
        return _b64(v)


class GeoKeyOut(BaseModel):
    id: int
    name: str
    kind: Literal["numeric", "text", "doubles"]
    value: Any = None
    label: Optional[str] = None


class GeoKeysResponse(BaseModel):
    header: Dict[str, int]
    entries: List[GeoKeyOut] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
