"""Geometry kernel - trimesh meshes with manifold3d booleans.

Every operation returns a new ``trimesh.Trimesh``; inputs are never mutated.
Angles passed to :func:`rotate` are in radians.
"""

from importlib import metadata
from typing import Optional

import numpy as np
import trimesh
import trimesh.boolean
import trimesh.creation
from trimesh import transformations

from shaperecipe import config

__all__ = [
    # Primitives
    "make_cuboid",
    "make_sphere",
    "make_cylinder",
    # Transforms
    "translate",
    "rotate",
    "scale",
    # Booleans
    "union_all",
    "subtract_chain",
    "intersect_all",
    # Measurements
    "measure_bounding_box",
    "kernel_info",
]


def _placed(mesh: trimesh.Trimesh, center) -> trimesh.Trimesh:
    if center is not None:
        mesh.apply_translation(center)
    return mesh


# ── Primitives ──────────────────────────────────────────────────


def make_cuboid(size, center=None) -> trimesh.Trimesh:
    """Axis-aligned box with full edge lengths ``size``, centered at origin."""
    if any(s < 0 for s in size):
        raise ValueError("size values must be positive")
    return _placed(trimesh.creation.box(extents=size), center)


def make_sphere(radius: float, center=None, segments: Optional[int] = None) -> trimesh.Trimesh:
    segments = segments or config.DEFAULT_SEGMENTS
    mesh = trimesh.creation.uv_sphere(radius=radius, count=[segments, segments])
    return _placed(mesh, center)


def make_cylinder(
    height: float, radius: float, center=None, segments: Optional[int] = None
) -> trimesh.Trimesh:
    """Cylinder along Z, centered at origin."""
    segments = segments or config.DEFAULT_SEGMENTS
    mesh = trimesh.creation.cylinder(radius=radius, height=height, sections=segments)
    return _placed(mesh, center)


# ── Transforms ──────────────────────────────────────────────────


def translate(offset, geometry: trimesh.Trimesh) -> trimesh.Trimesh:
    mesh = geometry.copy()
    mesh.apply_translation(offset)
    return mesh


def rotate(angles, geometry: trimesh.Trimesh) -> trimesh.Trimesh:
    """Rotate about the fixed X, then Y, then Z axes (one combined matrix)."""
    ax, ay, az = angles
    mesh = geometry.copy()
    mesh.apply_transform(transformations.euler_matrix(ax, ay, az, "sxyz"))
    return mesh


def scale(factors, geometry: trimesh.Trimesh) -> trimesh.Trimesh:
    sx, sy, sz = factors
    mesh = geometry.copy()
    mesh.apply_transform(np.diag([sx, sy, sz, 1.0]))
    return mesh


# ── Booleans ────────────────────────────────────────────────────


def union_all(geometries: list[trimesh.Trimesh]) -> trimesh.Trimesh:
    if len(geometries) == 1:
        return geometries[0].copy()
    return trimesh.boolean.union(geometries, engine=config.BOOLEAN_ENGINE)


def intersect_all(geometries: list[trimesh.Trimesh]) -> trimesh.Trimesh:
    if len(geometries) == 1:
        return geometries[0].copy()
    return trimesh.boolean.intersection(geometries, engine=config.BOOLEAN_ENGINE)


def subtract_chain(
    base: trimesh.Trimesh, others: list[trimesh.Trimesh]
) -> trimesh.Trimesh:
    """``((base - others[0]) - others[1]) - ...`` evaluated left to right."""
    result = base.copy()
    for other in others:
        if result.is_empty:
            break
        result = trimesh.boolean.difference(
            [result, other], engine=config.BOOLEAN_ENGINE
        )
    return result


# ── Measurements ────────────────────────────────────────────────


def measure_bounding_box(geometry: trimesh.Trimesh) -> list[list[float]]:
    """Return ``[[minX, minY, minZ], [maxX, maxY, maxZ]]``.

    An empty mesh measures as a zero box at the origin.
    """
    bounds = geometry.bounds
    if bounds is None:
        return [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]
    return [[float(v) for v in bounds[0]], [float(v) for v in bounds[1]]]


def kernel_info() -> dict:
    """Versions of the libraries backing the kernel."""
    info = {"trimesh": trimesh.__version__, "boolean_engine": config.BOOLEAN_ENGINE}
    try:
        info["manifold3d"] = metadata.version("manifold3d")
    except metadata.PackageNotFoundError:
        info["manifold3d"] = None
    return info
