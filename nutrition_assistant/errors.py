# -*- coding: utf-8 -*-
"""Error taxonomy shared by the relay and the chat flow.

Every error is scoped to a single request; nothing here is fatal to the process.
"""

from __future__ import annotations


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RelayError):
    """Rejected input (e.g. an empty message). Raised before any side effect."""

    status_code = 400


class ConfigurationError(RelayError):
    """Missing upstream credential or unusable provider settings."""


class UpstreamError(RelayError):
    """The text-generation API failed (non-2xx, unreachable, unreadable body)."""


class PersistenceError(RelayError):
    """A database write failed after a successful classification."""
