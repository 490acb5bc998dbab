"""Recipe schema - pydantic models for shape recipe documents.

A recipe is a small JSON document describing a solid as a tree of primitives
(cuboid, sphere, cylinder), transforms (translate, rotate, scale) and boolean
combinators (union, subtract, intersect):

    {"version": 1, "units": "mm", "name": "peg",
     "root": {"type": "translate", "offset": [0, 0, 5],
              "child": {"type": "cylinder", "height": 10, "radius": 2}}}

Nodes are discriminated by ``type``. Validated trees are frozen.
"""

import json
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
)

from shaperecipe.errors import RecipeValidationError

Number = Annotated[float, Field(strict=True, allow_inf_nan=False)]
PositiveNumber = Annotated[float, Field(strict=True, allow_inf_nan=False, gt=0)]


def _whole_number(value: Any) -> Any:
    # JSON encoders may write 16 as 16.0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


Segments = Annotated[int, Field(strict=True, gt=0), BeforeValidator(_whole_number)]
Vec3 = Tuple[Number, Number, Number]

PRIMITIVE_TYPES = frozenset({"cuboid", "sphere", "cylinder"})
BOOLEAN_TYPES = frozenset({"union", "subtract", "intersect"})
TRANSFORM_TYPES = frozenset({"translate", "rotate", "scale"})
NODE_TYPES = PRIMITIVE_TYPES | BOOLEAN_TYPES | TRANSFORM_TYPES

UNITS = ("mm", "cm", "m")


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


# ── Primitives ──────────────────────────────────────────────────


class CuboidNode(_Node):
    type: Literal["cuboid"]
    size: Vec3
    center: Optional[Vec3] = None


class SphereNode(_Node):
    type: Literal["sphere"]
    radius: PositiveNumber
    center: Optional[Vec3] = None
    segments: Optional[Segments] = None


class CylinderNode(_Node):
    type: Literal["cylinder"]
    height: PositiveNumber
    radius: PositiveNumber
    center: Optional[Vec3] = None
    segments: Optional[Segments] = None


# ── Combinators ─────────────────────────────────────────────────


class BooleanNode(_Node):
    """N-ary boolean. For ``subtract`` the first child is the base."""

    type: Literal["union", "subtract", "intersect"]
    children: Tuple["RecipeNode", ...] = Field(min_length=1)


# ── Transforms ──────────────────────────────────────────────────


class TranslateNode(_Node):
    type: Literal["translate"]
    offset: Vec3
    child: "RecipeNode"


class RotateNode(_Node):
    type: Literal["rotate"]
    angles: Vec3  # degrees about X, Y, Z
    child: "RecipeNode"


class ScaleNode(_Node):
    type: Literal["scale"]
    factors: Vec3
    child: "RecipeNode"


RecipeNode = Annotated[
    Union[
        CuboidNode,
        SphereNode,
        CylinderNode,
        BooleanNode,
        TranslateNode,
        RotateNode,
        ScaleNode,
    ],
    Field(discriminator="type"),
]

BooleanNode.model_rebuild()
TranslateNode.model_rebuild()
RotateNode.model_rebuild()
ScaleNode.model_rebuild()


class Recipe(BaseModel):
    """Top-level recipe document.

    ``units`` is informational: geometry is built in recipe units as given
    and no unit scale is applied.
    """

    model_config = ConfigDict(frozen=True)

    version: Literal[1]
    units: Literal["mm", "cm", "m"] = "mm"
    name: Optional[str] = None
    root: RecipeNode


def format_path(loc: tuple) -> str:
    """Turn a pydantic error location into a dotted recipe path.

    Discriminator tags that pydantic inserts into the location are dropped,
    so ``('root', 'union', 'children', 0, 'sphere', 'radius')`` becomes
    ``root.children[0].radius``.
    """
    path = ""
    for item in loc:
        if isinstance(item, int):
            path += f"[{item}]"
        elif item in NODE_TYPES:
            continue
        else:
            path = f"{path}.{item}" if path else str(item)
    return path


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path
    return f"{prefix}.{path}" if path else prefix


def _to_recipe_error(exc: ValidationError, prefix: str = "") -> RecipeValidationError:
    errors = [
        {
            "path": _join(prefix, format_path(tuple(err["loc"]))),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    first = errors[0]
    return RecipeValidationError(first["message"], first["path"], errors)


# Stands in for child nodes while a single node's own fields are validated.
_PLACEHOLDER = CuboidNode(type="cuboid", size=(0.0, 0.0, 0.0))

_NODE_ADAPTER = TypeAdapter(RecipeNode)


def _validate_shallow(raw: Any, path: str):
    """Validate one node's own fields, with its children stubbed out."""
    shallow = raw
    if isinstance(raw, Mapping):
        shallow = dict(raw)
        if "child" in shallow:
            shallow["child"] = _PLACEHOLDER
        if isinstance(shallow.get("children"), (list, tuple)):
            shallow["children"] = [_PLACEHOLDER] * len(shallow["children"])
    try:
        return _NODE_ADAPTER.validate_python(shallow)
    except ValidationError as e:
        raise _to_recipe_error(e, path) from e


def _validate_tree(raw: Any, path: str):
    """Validate a node tree one level at a time.

    The walk is iterative, so nesting depth is not limited by the validator
    or the interpreter. Nodes are checked in document order and the first
    failure is raised. A mapping that appears among its own ancestors is
    rejected as a cycle; the same mapping reused in separate branches is fine.
    """
    entries = []  # pre-order: [node, child slots]
    on_path = set()
    stack = [("enter", raw, path, None)]

    while stack:
        action, item, item_path, parent = stack.pop()
        if action == "exit":
            on_path.discard(item)
            continue

        if isinstance(item, Mapping) and id(item) in on_path:
            raise RecipeValidationError("Cyclic reference detected", item_path)

        node = _validate_shallow(item, item_path)
        index = len(entries)
        expand = isinstance(item, Mapping)
        entries.append([node, [] if expand and isinstance(node, BooleanNode) else None])
        if parent is not None:
            slots = entries[parent][1]
            if isinstance(slots, list):
                slots.append(index)
            else:
                entries[parent][1] = index

        if not expand:
            continue
        if isinstance(node, BooleanNode):
            children = [
                (c, f"{item_path}.children[{i}]") for i, c in enumerate(item["children"])
            ]
        elif isinstance(node, (TranslateNode, RotateNode, ScaleNode)):
            children = [(item["child"], f"{item_path}.child")]
        else:
            continue

        on_path.add(id(item))
        stack.append(("exit", id(item), None, None))
        for child, child_path in reversed(children):
            stack.append(("enter", child, child_path, index))

    # Children always follow their parent in pre-order; assemble bottom-up.
    built = [None] * len(entries)
    for index in reversed(range(len(entries))):
        node, slots = entries[index]
        if isinstance(slots, list):
            node = node.model_copy(update={"children": tuple(built[i] for i in slots)})
        elif slots is not None:
            node = node.model_copy(update={"child": built[slots]})
        built[index] = node
    return built[0]


def parse_recipe(raw: Any) -> Recipe:
    """Validate ``raw`` into a :class:`Recipe`.

    ``raw`` may be a mapping, a JSON document (``str``/``bytes``) or an
    already validated recipe. Raises RecipeValidationError on the first
    mismatch.
    """
    if isinstance(raw, Recipe):
        return raw
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise RecipeValidationError(f"Invalid JSON: {e}", "") from e

    shallow = raw
    if isinstance(raw, Mapping) and "root" in raw:
        shallow = {**raw, "root": _PLACEHOLDER}
    try:
        recipe = Recipe.model_validate(shallow)
    except ValidationError as e:
        raise _to_recipe_error(e) from e

    root = _validate_tree(raw["root"], "root")
    return recipe.model_copy(update={"root": root})
