"""Shape recipe FastAPI server."""

import asyncio
import base64
import json
import logging
import time

from fastapi import FastAPI, HTTPException, Response

from shaperecipe import __version__, config, kernel
from shaperecipe.errors import RecipeError
from shaperecipe.examples import EXAMPLES
from shaperecipe.models import (
    CompileRequest,
    CompileResponse,
    ExportRequest,
    ExportResponse,
    ExportStats,
    HealthResponse,
    ValidateRequest,
    ValidateResponse,
)
from shaperecipe.services import export_service, recipe_service

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Shape Recipe Compiler",
    description="Compile declarative JSON shape recipes into STL/OBJ meshes",
    version=__version__,
)

STATUS_CODES = {
    "validation": 422,
    "complexity": 413,
    "kernel": 500,
}
TIMEOUT_STATUS = 504


async def _run_bounded(fn, *args):
    """Run a blocking compile call in the executor under the compile timeout."""
    loop = asyncio.get_running_loop()
    return await asyncio.wait_for(
        loop.run_in_executor(None, fn, *args),
        timeout=config.COMPILE_TIMEOUT_SECONDS,
    )


def _rejection(response: Response, e: RecipeError) -> dict:
    response.status_code = STATUS_CODES.get(e.kind, 400)
    logger.warning("Rejected recipe (%s): %s", e.kind, e)
    return e.to_dict()


def _timeout(response: Response) -> dict:
    response.status_code = TIMEOUT_STATUS
    logger.warning("Compile exceeded %.0fs", config.COMPILE_TIMEOUT_SECONDS)
    return {
        "error": f"Compile timed out after {config.COMPILE_TIMEOUT_SECONDS:.0f}s",
        "error_kind": "timeout",
    }


# ── REST Endpoints ──────────────────────────────────────────────


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="ok",
        version=__version__,
        kernel=kernel.kernel_info(),
    )


@app.post("/api/validate", response_model=ValidateResponse)
async def validate(req: ValidateRequest):
    valid, node_count, error = recipe_service.validate_recipe(req.recipe)
    if error is None:
        return ValidateResponse(valid=valid, node_count=node_count)
    return ValidateResponse(**{**error.to_dict(), "valid": valid, "node_count": node_count})


@app.post("/api/compile", response_model=CompileResponse)
async def compile_recipe(req: CompileRequest, response: Response):
    t0 = time.perf_counter()
    try:
        result = await _run_bounded(recipe_service.compile_recipe, req.recipe)
    except RecipeError as e:
        return CompileResponse(ok=False, **_rejection(response, e))
    except asyncio.TimeoutError:
        return CompileResponse(ok=False, **_timeout(response))

    return CompileResponse(
        ok=True,
        node_count=result.node_count,
        bounding_box=result.bounding_box,
        timings={"compile_ms": round((time.perf_counter() - t0) * 1000, 2)},
    )


@app.post("/api/export", response_model=ExportResponse)
async def export(req: ExportRequest, response: Response):
    try:
        exported, stats = await _run_bounded(
            export_service.full_pipeline, req.recipe, req.format
        )
    except RecipeError as e:
        return ExportResponse(ok=False, **_rejection(response, e))
    except asyncio.TimeoutError:
        return ExportResponse(ok=False, **_timeout(response))

    return ExportResponse(
        ok=True,
        format=req.format,
        filename=exported.filename,
        mime=exported.mime,
        bytes_base64=base64.b64encode(exported.data).decode(),
        stats=ExportStats(**stats),
    )


@app.post("/api/export/file")
async def export_file(req: ExportRequest, response: Response):
    try:
        exported, stats = await _run_bounded(
            export_service.full_pipeline, req.recipe, req.format
        )
    except RecipeError as e:
        detail = _rejection(response, e)
        raise HTTPException(status_code=response.status_code, detail=detail)
    except asyncio.TimeoutError:
        detail = _timeout(response)
        raise HTTPException(status_code=TIMEOUT_STATUS, detail=detail)

    return Response(
        content=exported.data,
        media_type=exported.mime,
        headers={
            "Content-Disposition": f'attachment; filename="{exported.filename}"',
            "X-Stats": json.dumps(stats),
        },
    )


@app.get("/api/examples")
async def examples():
    return [
        {"description": ex["description"], "recipe": ex["recipe"]}
        for ex in EXAMPLES
    ]


# ── Main ────────────────────────────────────────────────────────


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=config.LOG_LEVEL)
    uvicorn.run(
        "shaperecipe.main:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
    )
