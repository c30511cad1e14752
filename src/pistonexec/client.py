"""
Client for the remote code-execution sandbox.

:class:`ExecutionClient` submits a single source file to the Piston
``/execute`` endpoint and turns whatever comes back into an
:class:`~pistonexec.models.ExecutionResult`.  It never raises for a failed
execution: an unsupported language, a transport problem and a program that
wrote to stderr are all reported as data.

Each fallible step returns either its value or a failed result, and
:meth:`ExecutionClient.execute` stops at the first failure.  There are no
retries; a failed attempt is reported as-is.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Union

import httpx

from .config import DEFAULT_API_URL, Config
from .errors import ErrorKind
from .languages import LanguageConfig, LanguageRegistry, default_registry
from .models import ExecutionFile, ExecutionRequest, ExecutionResult, PistonResponse, RunOutput

logger = logging.getLogger(__name__)

NO_OUTPUT = "No output"
JSON_HEADERS = {"Content-Type": "application/json"}


def build_request(config: LanguageConfig, code: str) -> ExecutionRequest:
    """Build a one-file submission named ``main.<extension>``."""
    return ExecutionRequest(
        language=config.language,
        version=config.version,
        files=[ExecutionFile(name=f"main.{config.file_extension}", content=code)],
    )


def classify(run: RunOutput) -> ExecutionResult:
    """Turn the sandbox's captured output into a result.

    Any stderr marks the run as failed, even when stdout is non-empty.
    """
    if run.stderr:
        return ExecutionResult.failure(ErrorKind.EXECUTION, run.stderr, output=run.output)
    return ExecutionResult(success=True, output=run.output or NO_OUTPUT)


def _transport_failure(exc: Exception) -> ExecutionResult:
    return ExecutionResult.failure(ErrorKind.TRANSPORT, f"Failed to execute code: {exc}")


class ExecutionClient:
    """Submit code to the sandbox.

    Parameters
    ----------
    registry: LanguageRegistry
        Languages accepted by :meth:`execute`.
    base_url: str
        Sandbox API root; requests go to ``<base_url>/execute``.
    timeout: float, optional
        Per-request timeout in seconds.  ``None`` keeps the transport default.
    http_client: httpx.AsyncClient, optional
        Shared client to send requests with.  The caller owns its lifetime.
        When omitted a client is opened and closed for every call.
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        base_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.registry = registry
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_config(
        cls,
        config: Config,
        registry: Optional[LanguageRegistry] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "ExecutionClient":
        return cls(
            registry if registry is not None else default_registry(),
            base_url=config.api_url,
            timeout=config.timeout_seconds,
            http_client=http_client,
        )

    @property
    def execute_url(self) -> str:
        return f"{self.base_url}/execute"

    async def execute(self, language: str, code: str) -> ExecutionResult:
        """Run ``code`` as ``language`` in the sandbox."""
        config = self.registry.get(language)
        if config is None:
            logger.warning("Unsupported language: %s", language)
            return ExecutionResult.failure(
                ErrorKind.UNSUPPORTED_LANGUAGE, f"Unsupported language: {language}"
            )

        response = await self._send(build_request(config, code))
        if isinstance(response, ExecutionResult):
            return response

        failed = self._check_status(response)
        if failed is not None:
            return failed

        run = self._parse(response)
        if isinstance(run, ExecutionResult):
            return run

        result = classify(run)
        logger.debug("Execution of %s finished: success=%s", language, result.success)
        return result

    async def _send(self, request: ExecutionRequest) -> Union[httpx.Response, ExecutionResult]:
        # ASCII-only JSON: lone surrogates in user code are sent as \u escapes.
        kwargs: Dict[str, Any] = {
            "content": json.dumps(request.model_dump()),
            "headers": JSON_HEADERS,
            "follow_redirects": True,
        }
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        logger.debug("POST %s language=%s version=%s", self.execute_url, request.language, request.version)
        try:
            if self._http_client is not None:
                return await self._http_client.post(self.execute_url, **kwargs)
            async with httpx.AsyncClient() as client:
                return await client.post(self.execute_url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Request to %s failed: %s", self.execute_url, exc)
            return _transport_failure(exc)

    def _check_status(self, response: httpx.Response) -> Optional[ExecutionResult]:
        if response.is_success:
            return None
        logger.warning("Sandbox returned HTTP %s", response.status_code)
        return ExecutionResult.failure(
            ErrorKind.TRANSPORT, f"HTTP error! status: {response.status_code}"
        )

    def _parse(self, response: httpx.Response) -> Union[RunOutput, ExecutionResult]:
        try:
            return PistonResponse.model_validate(response.json()).run
        except ValueError as exc:
            # Covers malformed JSON as well as pydantic's ValidationError.
            logger.warning("Unreadable sandbox response: %s", exc)
            return _transport_failure(exc)


async def execute_code(
    language: str,
    code: str,
    *,
    client: Optional[ExecutionClient] = None,
) -> ExecutionResult:
    """Execute ``code`` with ``client``, or with one built from the environment."""
    if client is None:
        client = ExecutionClient.from_config(Config.from_env())
    return await client.execute(language, code)
