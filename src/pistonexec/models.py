"""Pydantic models for the sandbox wire format and for execution results.

``ExecutionRequest`` and ``PistonResponse`` mirror the body sent to and
returned by the Piston ``/execute`` endpoint.  Only the fields this package
reads are declared; anything else in the response is ignored.
``ExecutionResult`` is what callers of the client (and of the HTTP API) get
back.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .errors import ErrorKind


class ExecutionFile(BaseModel):
    """A single source file submitted to the sandbox."""

    name: str
    content: str


class ExecutionRequest(BaseModel):
    """Request body for the sandbox ``/execute`` endpoint."""

    language: str
    version: str
    files: List[ExecutionFile]


class RunOutput(BaseModel):
    """The ``run`` section of a sandbox response."""

    output: str = ""
    stderr: str = ""

    @field_validator("output", "stderr", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        # A null field means the same as an empty one.
        return "" if value is None else value


class PistonResponse(BaseModel):
    """Response body of the sandbox ``/execute`` endpoint."""

    run: RunOutput


class ExecutionResult(BaseModel):
    """Outcome of one execution.

    ``output`` may be present alongside ``error`` when the program printed
    something before failing.
    """

    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @model_validator(mode="after")
    def _error_means_failure(self) -> "ExecutionResult":
        if self.success and self.error is not None:
            raise ValueError("a result carrying an error cannot be successful")
        return self

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        error: str,
        output: Optional[str] = None,
    ) -> "ExecutionResult":
        return cls(success=False, output=output, error=error, error_kind=kind)

    def to_payload(self) -> Dict[str, Any]:
        """Return ``{success, output?, error?}`` with absent fields omitted."""
        return self.model_dump(include={"success", "output", "error"}, exclude_none=True)


class ExecuteRequest(BaseModel):
    """Request body for the HTTP API ``/execute`` route."""

    language: str = Field(..., description="Language identifier, e.g. 'python'.")
    code: str = Field(..., description="Source code to execute.")


class LanguageInfo(BaseModel):
    """A supported language as listed by the HTTP API."""

    id: str
    language: str
    version: str
    file_extension: str
