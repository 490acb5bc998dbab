"""Recipe Service - validates recipe documents and compiles them to geometry."""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Optional

import trimesh

from shaperecipe import config, kernel
from shaperecipe.errors import ComplexityError, KernelError, RecipeError
from shaperecipe.schema import (
    BooleanNode,
    CuboidNode,
    CylinderNode,
    Recipe,
    RotateNode,
    ScaleNode,
    SphereNode,
    TranslateNode,
    parse_recipe,
)

logger = logging.getLogger(__name__)

DEG_TO_RAD = math.pi / 180

BoundingBox = list[list[float]]


@dataclass
class CompiledResult:
    geometry: trimesh.Trimesh
    bounding_box: BoundingBox
    node_count: int


def count_nodes(node) -> int:
    """Number of nodes in a validated recipe tree (the node itself included)."""
    total = 0
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, (TranslateNode, RotateNode, ScaleNode)):
            stack.append(current.child)
        elif isinstance(current, BooleanNode):
            stack.extend(current.children)
        elif not isinstance(current, (CuboidNode, SphereNode, CylinderNode)):
            raise TypeError(f"Unsupported node type: {type(current).__name__}")
        total += 1
    return total


def _kernel_call(path: str, fn, *args, **kwargs):
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        raise KernelError(str(e) or type(e).__name__, path) from e


def compile_node(node, path: str = "root") -> trimesh.Trimesh:
    """Lower a validated node into kernel geometry.

    Children are compiled in document order. Kernel failures surface as
    KernelError carrying ``path`` of the node whose kernel call failed.
    """
    if isinstance(node, CuboidNode):
        return _kernel_call(path, kernel.make_cuboid, node.size, center=node.center)
    if isinstance(node, SphereNode):
        return _kernel_call(
            path, kernel.make_sphere, node.radius,
            center=node.center, segments=node.segments,
        )
    if isinstance(node, CylinderNode):
        return _kernel_call(
            path, kernel.make_cylinder, node.height, node.radius,
            center=node.center, segments=node.segments,
        )

    if isinstance(node, TranslateNode):
        child = compile_node(node.child, f"{path}.child")
        return _kernel_call(path, kernel.translate, node.offset, child)
    if isinstance(node, RotateNode):
        child = compile_node(node.child, f"{path}.child")
        radians = [a * DEG_TO_RAD for a in node.angles]
        return _kernel_call(path, kernel.rotate, radians, child)
    if isinstance(node, ScaleNode):
        child = compile_node(node.child, f"{path}.child")
        return _kernel_call(path, kernel.scale, node.factors, child)

    if isinstance(node, BooleanNode):
        compiled = [
            compile_node(c, f"{path}.children[{i}]")
            for i, c in enumerate(node.children)
        ]
        if node.type == "union":
            return _kernel_call(path, kernel.union_all, compiled)
        if node.type == "intersect":
            return _kernel_call(path, kernel.intersect_all, compiled)
        first, *rest = compiled
        return _kernel_call(path, kernel.subtract_chain, first, rest)

    raise TypeError(f"Unsupported node type: {type(node).__name__}")


def measure(geometry: trimesh.Trimesh) -> BoundingBox:
    """Axis-aligned bounding box of compiled geometry."""
    return _kernel_call("root", kernel.measure_bounding_box, geometry)


def check_complexity(recipe: Recipe) -> int:
    """Count nodes and enforce the node-count guard. Returns the count."""
    node_count = count_nodes(recipe.root)
    if node_count > config.MAX_NODE_COUNT:
        raise ComplexityError(node_count, config.MAX_NODE_COUNT)
    return node_count


def compile_recipe(raw: Any) -> CompiledResult:
    """Full compile: validate -> count -> guard -> compile -> bounding box.

    Any stage failure raises and later stages never run.
    """
    t0 = time.perf_counter()
    recipe = parse_recipe(raw)
    node_count = check_complexity(recipe)
    geometry = compile_node(recipe.root)
    bounding_box = measure(geometry)

    logger.info(
        "Compiled recipe %r: nodes=%d  %.1fms",
        recipe.name or config.DEFAULT_MODEL_NAME,
        node_count,
        (time.perf_counter() - t0) * 1000,
    )
    return CompiledResult(
        geometry=geometry, bounding_box=bounding_box, node_count=node_count
    )


def validate_recipe(raw: Any) -> tuple[bool, Optional[int], Optional[RecipeError]]:
    """Validate a recipe without compiling it.

    Returns (valid, node_count, error). ``node_count`` is set whenever the
    document is structurally valid, including when it fails the guard.
    """
    try:
        recipe = parse_recipe(raw)
    except RecipeError as e:
        return False, None, e
    try:
        node_count = check_complexity(recipe)
    except ComplexityError as e:
        return False, e.node_count, e
    return True, node_count, None
