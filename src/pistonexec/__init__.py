"""Remote code execution client package.

This package submits source code to a public Piston code‑execution API and
classifies the response into success, partial output with an error, or
failure.  It can be used as a library or run as a small HTTP service.

The top‑level modules include:

* ``config`` – configuration handling for environment variables.
* ``languages`` – the registry of supported languages and runtime versions.
* ``models`` – Pydantic models for the sandbox wire format and results.
* ``client`` – the asynchronous execution client.
* ``api`` – FastAPI application exposing HTTP endpoints.
"""

from .client import ExecutionClient, build_request, classify, execute_code
from .errors import ErrorKind
from .languages import DEFAULT_LANGUAGES, LanguageConfig, LanguageRegistry, default_registry
from .models import ExecutionRequest, ExecutionResult

__all__ = [
    "DEFAULT_LANGUAGES",
    "ErrorKind",
    "ExecutionClient",
    "ExecutionRequest",
    "ExecutionResult",
    "LanguageConfig",
    "LanguageRegistry",
    "build_request",
    "classify",
    "default_registry",
    "execute_code",
]
