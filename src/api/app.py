from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import JSONResponse

from .routers.medicines import router as medicines_router

load_dotenv(override=True)

# Configure logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The search service (and its store connection) is created lazily on first request
    logger.info("Medicine catalog API starting (root_path=%r)", app.root_path)
    yield
    logger.info("Medicine catalog API shutting down")


"""
FastAPI application

Note on OpenAPI/Swagger docs:
Some recent combinations of FastAPI/Starlette serve the OpenAPI schema with
the vendor media type "application/vnd.oai.openapi+json". In certain client
environments (or with strict Accept headers), this can cause a 406 Not
Acceptable when the Swagger UI tries to fetch /openapi.json.

To avoid that, we disable the auto-registered OpenAPI/docs routes and add
explicit JSONResponse-based endpoints for the schema and Swagger UI.
"""

# Optional base path for deployments under a subpath (e.g.
# https://example.com/pharmacy/...). Used as the ASGI root_path and advertised
# via OpenAPI "servers" so Swagger UI "Try it out" hits the prefixed URLs.
_env_base_path = os.getenv("API_BASE_PATH", "").strip()
if _env_base_path and not _env_base_path.startswith("/"):
    _env_base_path = "/" + _env_base_path
if _env_base_path.endswith("/") and _env_base_path != "/":
    _env_base_path = _env_base_path.rstrip("/")

app = FastAPI(
    title="Medicine Catalog API",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    root_path=_env_base_path or "",
)


# CORS: allow browser apps hosted on other origins to call this API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Access log line: METHOD URL STATUS CONTENT_LENGTH - X ms."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    logger.info(
        "%s %s %s %s - %.3f ms",
        request.method,
        url,
        response.status_code,
        response.headers.get("content-length", "-"),
        elapsed_ms,
    )
    return response


# Mount routers
app.include_router(medicines_router)


@app.get("/health", tags=["ops"], summary="Health check")
async def health():
    return {"status": "ok"}


def _with_servers(base_path: str | None):
    """Return OpenAPI schema optionally annotated with servers -> [{url: base_path}]."""
    schema = app.openapi()
    if base_path and base_path != "/":
        # FastAPI caches app.openapi(); copy instead of mutating it
        schema = {**schema, "servers": [{"url": base_path}]}
    return schema


# Explicit OpenAPI JSON (forces application/json, avoids 406 with strict Accept)
@app.get("/openapi.json", include_in_schema=False)
def openapi_json():
    return JSONResponse(_with_servers(_env_base_path or None))


# Relative openapi_url so the UI works behind a reverse proxy subpath
@app.get("/docs", include_in_schema=False)
def swagger_ui():
    return get_swagger_ui_html(openapi_url="openapi.json", title="Medicine Catalog API Docs")
