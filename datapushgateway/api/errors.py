"""Domain exceptions and Falcon error handlers for the API layer.

Usage
-----
Register error handlers on the Falcon app::

    from datapushgateway.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from datapushgateway.errors import ConfigError, DocumentWriteError
from datapushgateway.logging import (
    get_logger,
    log_error,
    log_exception,
    log_warning,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = [
    "AUTH_REALM",
    "AuthenticationError",
    "InvalidInputError",
    "handle_authentication_error",
    "handle_config_error",
    "handle_document_write_error",
    "handle_invalid_input",
    "register_error_handlers",
]

logger = get_logger(__name__)

AUTH_REALM = "api"
DEFAULT_AUTH_REASON = "valid basic-auth credentials are required"


class InvalidInputError(Exception):
    """Raised for client validation errors that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


class AuthenticationError(Exception):
    """Raised when a protected route is called without valid credentials."""

    def __init__(self, reason: str = DEFAULT_AUTH_REASON) -> None:
        """Initialize with the reason reported to the client."""
        self.reason = reason
        super().__init__(reason)


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_authentication_error(
    req: Request,
    resp: Response,
    ex: AuthenticationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthenticationError`` to HTTP 401 with a Basic challenge."""
    log_warning(logger, "Rejected request from %s: %s", req.remote_addr, ex.reason)
    resp.status = falcon.HTTP_401
    resp.set_header("WWW-Authenticate", f'Basic realm="{AUTH_REALM}"')
    resp.media = {"title": "Unauthorized", "description": ex.reason}


async def handle_config_error(
    _req: Request,
    resp: Response,
    ex: ConfigError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``ConfigError`` to HTTP 500 listing the configuration issues.

    The request fails but the process keeps serving, so an operator can
    fix the taxonomy without a restart.
    """
    log_error(logger, "Configuration error: %s", ex)
    resp.status = falcon.HTTP_500
    resp.media = {
        "title": "Configuration error",
        "description": str(ex),
        "issues": ex.issues,
    }


async def handle_document_write_error(
    _req: Request,
    resp: Response,
    ex: DocumentWriteError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``DocumentWriteError`` to HTTP 500."""
    log_exception(logger, f"Write failed: {ex}", ex)
    resp.status = falcon.HTTP_500
    resp.media = {
        "title": "Write failed",
        "description": ex.reason,
        "document": ex.document,
    }


def register_error_handlers(app: App) -> None:
    """Attach every domain error handler to ``app``."""
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(AuthenticationError, handle_authentication_error)
    app.add_error_handler(ConfigError, handle_config_error)
    app.add_error_handler(DocumentWriteError, handle_document_write_error)
