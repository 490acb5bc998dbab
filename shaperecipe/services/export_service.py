"""Export Service - serializes compiled geometry to STL/OBJ files."""

import re
import time
from dataclasses import dataclass
from typing import Any, Optional

import trimesh

from shaperecipe import config
from shaperecipe.schema import parse_recipe
from shaperecipe.services import recipe_service

_UNSAFE_NAME = re.compile(r"[^a-zA-Z0-9._-]+")

# trimesh exporter names per public format
_FILE_TYPES = {
    "stl": "stl_ascii",
    "obj": "obj",
}


@dataclass
class ExportedFile:
    extension: str
    mime: str
    filename: str
    data: bytes


def safe_name(name: Optional[str]) -> str:
    """Replace every run of characters outside ``[a-zA-Z0-9._-]`` with ``_``."""
    return _UNSAFE_NAME.sub("_", name or config.DEFAULT_MODEL_NAME)


def export_geometry(
    geometry: trimesh.Trimesh,
    fmt: str = "stl",
    name: Optional[str] = None,
) -> ExportedFile:
    """Export geometry to ASCII STL or OBJ bytes."""
    if fmt not in config.EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    data = geometry.export(file_type=_FILE_TYPES[fmt])
    if isinstance(data, str):
        data = data.encode("utf-8")

    return ExportedFile(
        extension=fmt,
        mime=config.EXPORT_FORMATS[fmt],
        filename=f"{safe_name(name)}.{fmt}",
        data=data,
    )


def full_pipeline(raw: Any, fmt: str = "stl") -> tuple[ExportedFile, dict]:
    """Full pipeline: recipe -> validate -> compile -> export.

    Returns (exported_file, stats).
    """
    timings = {}

    t0 = time.perf_counter()
    recipe = parse_recipe(raw)
    timings["validate_ms"] = round((time.perf_counter() - t0) * 1000, 2)

    t0 = time.perf_counter()
    result = recipe_service.compile_recipe(recipe)
    timings["compile_ms"] = round((time.perf_counter() - t0) * 1000, 2)

    t0 = time.perf_counter()
    exported = export_geometry(result.geometry, fmt, recipe.name)
    timings["export_ms"] = round((time.perf_counter() - t0) * 1000, 2)

    stats = {
        "node_count": result.node_count,
        "bounding_box": result.bounding_box,
        "vertices": len(result.geometry.vertices),
        "triangles": len(result.geometry.faces),
        "timings": timings,
    }

    return exported, stats
