"""Failure kinds reported by the execution client."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Why an execution did not succeed.

    ``UNSUPPORTED_LANGUAGE`` is detected before any I/O.  ``TRANSPORT``
    covers non‑2xx statuses, network failures and unreadable response
    bodies.  ``EXECUTION`` means the sandbox ran the program and it wrote to
    stderr; this is an outcome of the user's code, not a system fault.
    """

    UNSUPPORTED_LANGUAGE = "unsupported_language"
    TRANSPORT = "transport"
    EXECUTION = "execution"
