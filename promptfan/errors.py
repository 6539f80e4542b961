# promptfan/errors.py
"""Failure taxonomy for backend adapters.

Adapters raise these inside their own vendor call; `BaseProvider.complete`
turns every one of them into the `error` field of a response.
"""

from __future__ import annotations


class ProviderError(RuntimeError):
    """Base class for adapter-level failures."""


class MissingCredentialError(ProviderError):
    """No usable credential; the vendor call is never attempted."""


class UpstreamError(ProviderError):
    """The vendor call was attempted and failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamTimeoutError(UpstreamError):
    """The vendor did not answer within the adapter's timeout."""
