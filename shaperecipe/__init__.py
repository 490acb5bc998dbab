"""shape-recipe: compile declarative JSON shape recipes into meshes."""

__version__ = "0.1.0"
