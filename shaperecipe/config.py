"""Configuration for the shape-recipe compiler server."""

import os
from dotenv import load_dotenv

load_dotenv()

# Complexity guard (hard reject above this many recipe nodes)
MAX_NODE_COUNT = 500

# Kernel defaults
DEFAULT_SEGMENTS = int(os.getenv("DEFAULT_SEGMENTS", "32"))
BOOLEAN_ENGINE = os.getenv("BOOLEAN_ENGINE", "manifold")

# Export
EXPORT_FORMATS = {
    "stl": "model/stl",
    "obj": "model/obj",
}
DEFAULT_EXPORT_FORMAT = os.getenv("DEFAULT_EXPORT_FORMAT", "stl")
DEFAULT_MODEL_NAME = "model"

# Wall-clock bound applied by the HTTP layer around a compile call
COMPILE_TIMEOUT_SECONDS = float(os.getenv("COMPILE_TIMEOUT_SECONDS", "30"))

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
