"""Configuration loader.

The execution client and its HTTP front end read their configuration from
environment variables so the same package can run against the public Piston
instance or a self-hosted one.  Reasonable defaults are provided so that local
development works out of the box.

Environment variables:

``PISTONEXEC_API_URL``
    Base URL of the Piston API.  The client posts to ``<base>/execute``.
    Defaults to the public instance at ``https://emkc.org/api/v2/piston``.

``PISTONEXEC_TIMEOUT_SECONDS``
    Optional timeout (in seconds) applied to each outbound request.  When
    unset the transport default is used.

``PISTONEXEC_API_KEY``
    Shared secret for incoming requests to the HTTP API.  Clients must send
    it in the ``x‑api‑key`` header.  Empty disables the check.

``PISTONEXEC_CLIENT_URL``
    Origin of the browser UI allowed by CORS.  Unset disables CORS.

``PORT``
    The port on which the API server listens.  Defaults to 8080.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_API_URL = "https://emkc.org/api/v2/piston"


def _int_var(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {val}")


def _timeout_var(name: str) -> float | None:
    val = os.getenv(name)
    if val is None or not val.strip():
        return None
    try:
        timeout = float(val)
    except ValueError:
        raise ValueError(f"Invalid number for {name}: {val}")
    if timeout <= 0:
        raise ValueError(f"{name} must be positive, got {val}")
    return timeout


@dataclass(frozen=True)
class Config:
    """Centralised configuration object."""

    api_url: str
    timeout_seconds: float | None
    api_key: str
    client_url: str | None
    port: int

    @classmethod
    def load(cls) -> "Config":
        api_url = os.getenv("PISTONEXEC_API_URL", DEFAULT_API_URL).strip().rstrip("/")
        if not api_url:
            raise ValueError("PISTONEXEC_API_URL must not be empty")

        # API key may be empty in local development but should be set in production.
        api_key = os.getenv("PISTONEXEC_API_KEY", "")
        client_url = os.getenv("PISTONEXEC_CLIENT_URL") or None

        return cls(
            api_url=api_url,
            timeout_seconds=_timeout_var("PISTONEXEC_TIMEOUT_SECONDS"),
            api_key=api_key,
            client_url=client_url,
            port=_int_var("PORT", 8080),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Alternate constructor used by the API to load configuration.

        This wrapper calls :meth:`load` to construct the configuration.
        It exists to provide a more intuitive name when consumed in
        application code.
        """
        return cls.load()
