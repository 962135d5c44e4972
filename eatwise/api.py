# -*- coding: utf-8 -*-
"""
EatWise interaction API

Ingredient compatibility and multi-condition food guides over the curated
ingredient/condition interaction graph.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .app_db import init_app_db
from .catalog.api import router as catalog_router
from .catalog.storage import count_entities
from .compatibility.api import router as compatibility_router
from .config import settings
from .errors import EngineError
from .guide.api import router as guide_router
from .seed import load_seed
from .sources.api import router as sources_router

logger = logging.getLogger(__name__)
logging.getLogger("eatwise").setLevel(settings.log_level)

app = FastAPI(
    title="EatWise",
    description="Evidence-weighted ingredient and condition interaction resolution",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _load_seed_if_empty() -> None:
    if settings.seed_file is None:
        return
    counts = count_entities()
    if counts["ingredients"] or counts["conditions"]:
        return
    logger.info("Empty catalog; importing seed file %s", settings.seed_file)
    load_seed(settings.seed_file)


@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.db_path)
    _load_seed_if_empty()


# Ensure the database exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.db_path)


@app.exception_handler(EngineError)
async def _engine_error(request: Request, exc: EngineError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else f"Request failed ({exc.status_code})"
    return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"message": "; ".join(parts) or "Invalid request"})


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(compatibility_router)
app.include_router(guide_router)
app.include_router(catalog_router)
app.include_router(sources_router)


@app.get("/api/health")
def health() -> dict:
    return {"ok": True}


@app.get("/", include_in_schema=False)
def root() -> dict:
    return {"message": "EatWise API", "docs": "/api/docs"}


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    try:
        port = int(settings.port_raw)
    except ValueError:
        port = 8000

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "eatwise.api:app",
        host=settings.host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
