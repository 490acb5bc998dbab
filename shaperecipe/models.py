"""Pydantic models for the shape-recipe HTTP API."""

from pydantic import BaseModel, Field
from typing import Any, Optional, Literal

from shaperecipe import config


class ValidateRequest(BaseModel):
    recipe: Any = Field(..., description="Recipe document (object or JSON string)")


class ValidateResponse(BaseModel):
    valid: bool
    node_count: Optional[int] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    path: Optional[str] = None


class CompileRequest(BaseModel):
    recipe: Any = Field(..., description="Recipe document (object or JSON string)")


class CompileResponse(BaseModel):
    ok: bool
    node_count: Optional[int] = None
    bounding_box: Optional[list[list[float]]] = None
    timings: Optional[dict] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    path: Optional[str] = None


class ExportRequest(BaseModel):
    recipe: Any = Field(..., description="Recipe document (object or JSON string)")
    format: Literal["stl", "obj"] = config.DEFAULT_EXPORT_FORMAT


class ExportStats(BaseModel):
    node_count: int
    bounding_box: list[list[float]]
    vertices: int
    triangles: int
    timings: dict = {}


class ExportResponse(BaseModel):
    ok: bool
    format: Optional[str] = None
    filename: Optional[str] = None
    mime: Optional[str] = None
    bytes_base64: Optional[str] = None
    stats: Optional[ExportStats] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    path: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = ""
    kernel: dict = {}
