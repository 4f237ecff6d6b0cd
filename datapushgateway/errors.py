"""Error taxonomy shared across the push gateway core.

The hierarchy mirrors how far a failure is allowed to propagate:

- ``ConfigError``: the taxonomy, auth file or application config is
  unusable. Fatal to the request, never to the process.
- ``RecordError``: one incoming record cannot be classified or decoded.
  Logged and skipped; the batch continues.
- ``DocumentWriteError``: a report directory or file could not be created,
  written or removed. Fatal to the affected document only.
- ``SyncError``: a step of the version-control session failed. Fatal to the
  session and surfaced to the caller (see ``datapushgateway.sync.errors``).
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for push gateway errors."""


class ConfigError(GatewayError, ValueError):
    """Raised when configuration artefacts are missing or malformed."""

    def __init__(self, issues: list[str] | str) -> None:
        """Capture one or more issues whilst keeping an aggregated message."""
        self.issues = [issues] if isinstance(issues, str) else list(issues)
        super().__init__("\n".join(self.issues))


class RecordError(GatewayError):
    """Raised when a single record in a batch is unusable."""

    def __init__(self, reason: str, *, index: int | None = None) -> None:
        """Initialise with a reason and the record's position in the batch."""
        self.reason = reason
        self.index = index
        message = f"record {index}: {reason}" if index is not None else reason
        super().__init__(message)


class DocumentWriteError(GatewayError):
    """Raised when a rendered document cannot be persisted."""

    def __init__(self, document: str, reason: str) -> None:
        """Initialise with the document name and failure reason."""
        self.document = document
        self.reason = reason
        super().__init__(f"document {document!r}: {reason}")


__all__ = ["ConfigError", "DocumentWriteError", "GatewayError", "RecordError"]
