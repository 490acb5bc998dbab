"""Typed failures raised by the recipe compile pipeline."""

from typing import Optional


class RecipeError(Exception):
    """Base class for every failure of a compile call."""

    kind = "error"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def to_dict(self) -> dict:
        return {"error": self.message, "error_kind": self.kind, "path": self.path}


class RecipeValidationError(RecipeError):
    """The input does not conform to the recipe grammar.

    ``path`` points at the first offending location, e.g.
    ``root.children[0].radius``. ``errors`` keeps the full list reported by
    the validator.
    """

    kind = "validation"

    def __init__(self, message: str, path: str = "", errors: Optional[list] = None):
        super().__init__(message, path)
        self.errors = errors or []

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ComplexityError(RecipeError):
    """A structurally valid recipe has more nodes than the guard allows."""

    kind = "complexity"

    def __init__(self, node_count: int, limit: int):
        super().__init__(
            f"Recipe too complex: {node_count} nodes (max {limit})", path="root"
        )
        self.node_count = node_count
        self.limit = limit

    def to_dict(self) -> dict:
        return {**super().to_dict(), "node_count": self.node_count, "limit": self.limit}


class KernelError(RecipeError):
    """The geometry kernel failed on an otherwise valid node."""

    kind = "kernel"

    def __str__(self) -> str:
        return f"{self.message} (at {self.path})" if self.path else self.message
