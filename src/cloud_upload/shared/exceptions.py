"""Hierarchical exception types for the upload client."""

from __future__ import annotations


class CloudUploadError(Exception):
    """Base exception for all upload client errors."""


# ── Local input ─────────────────────────────────────────────────


class ValidationError(CloudUploadError):
    """Malformed local input: bad path, unsupported binary, bad tag/env syntax."""


# ── Remote service ──────────────────────────────────────────────


class HttpStatusError(CloudUploadError):
    """A request to the service failed with an HTTP status and body."""

    def __init__(self, status: int | None, body: str, *, url: str = "") -> None:
        self.status = status
        self.body = body
        self.url = url
        if status is None:
            message = f"Request to {url} failed: {body}" if url else body
        else:
            message = f"Request to {url} failed ({status}): {body}" if url else f"HTTP {status}: {body}"
        super().__init__(message)


class TransportError(HttpStatusError):
    """Upload rejected with a non-2xx response, or the network call itself failed.

    ``status`` is ``None`` for connection-level failures.
    """


class StatusQueryError(HttpStatusError):
    """Status query answered with an HTTP status of 400 or above."""
