"""
FastAPI application for the code execution client.

This module configures the FastAPI application, registers routes for
listing languages and executing code, and enforces authentication via an
API key.  Execution itself is delegated to the remote sandbox through
:class:`~pistonexec.client.ExecutionClient`; failed executions are returned
as regular ``200`` responses with ``success`` set to ``false``.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Dict, List

import httpx
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..client import ExecutionClient
from ..config import Config
from ..languages import LanguageRegistry, default_registry
from ..models import ExecuteRequest, ExecutionResult, LanguageInfo


logger = logging.getLogger("pistonexec")

if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("[pistonexec] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.setLevel(logging.INFO)


config = Config.from_env()
registry = default_registry()

logger.info(
    "Loaded config: api_url=%s, timeout=%s, languages=%s, cors_origin=%s",
    config.api_url,
    config.timeout_seconds,
    registry.ids(),
    config.client_url,
)


app = FastAPI(title="Code Execution Client", version="0.1.0")


@app.middleware("http")
async def authenticate(request, call_next):
    """Middleware to enforce API key authentication on all requests."""
    path = request.url.path
    method = request.method
    client = getattr(request.client, "host", "unknown")

    logger.info("Incoming request: %s %s from %s", method, path, client)

    if config.api_key and request.headers.get("x-api-key") != config.api_key:
        logger.warning("Invalid API key for %s %s from %s", method, path, client)
        return JSONResponse(status_code=401, content={"detail": "Invalid API key"})

    response = await call_next(request)
    logger.info("Response: %s %s -> %s", method, path, response.status_code)
    return response


# Registered last so it is outermost; preflight requests never reach authenticate.
if config.client_url:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def get_registry() -> LanguageRegistry:
    return registry


async def get_client(
    languages: LanguageRegistry = Depends(get_registry),
) -> AsyncIterator[ExecutionClient]:
    """Yield a client sharing one HTTP connection pool for the request."""
    async with httpx.AsyncClient() as http_client:
        yield ExecutionClient.from_config(config, registry=languages, http_client=http_client)


@app.get("/health")
async def health() -> Dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}


@app.get("/languages", response_model=List[LanguageInfo])
async def list_languages(languages: LanguageRegistry = Depends(get_registry)) -> List[LanguageInfo]:
    return [
        LanguageInfo(
            id=lang.id,
            language=lang.language,
            version=lang.version,
            file_extension=lang.file_extension,
        )
        for lang in languages.values()
    ]


@app.post("/execute", response_model=ExecutionResult, response_model_exclude_none=True)
async def execute(
    req: ExecuteRequest,
    client: ExecutionClient = Depends(get_client),
) -> ExecutionResult:
    """Execute code in the remote sandbox and return the classified result."""
    logger.info("[/execute] language=%s, code_length=%s", req.language, len(req.code))
    result = await client.execute(req.language, req.code)
    logger.info(
        "[/execute] finished: success=%s, error_kind=%s",
        result.success,
        result.error_kind.value if result.error_kind else None,
    )
    return result
