"""Falcon middleware for request logging and basic authentication.

Usage
-----
Register the middleware when creating the Falcon app::

    from datapushgateway.api.middleware import (
        BasicAuthMiddleware,
        RequestLoggingMiddleware,
    )

    app = falcon.asgi.App(
        middleware=[RequestLoggingMiddleware(), BasicAuthMiddleware(credentials)]
    )

Resources opt into authentication with a ``requires_auth = True`` class
attribute.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import typing as typ

from datapushgateway.api.errors import AuthenticationError
from datapushgateway.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from datapushgateway.auth.credentials import CredentialStore

__all__ = ["BasicAuthMiddleware", "RequestLoggingMiddleware", "parse_basic_auth"]

logger = get_logger(__name__)

_BASIC_SCHEME = "basic"


def parse_basic_auth(header: str | None) -> tuple[str, str] | None:
    """Return ``(username, password)`` from an ``Authorization`` header.

    ``None`` is returned for a missing header, another scheme, or a value
    that is not base64-encoded ``user:password``.
    """
    if not header:
        return None
    scheme, _, encoded = header.strip().partition(" ")
    if scheme.lower() != _BASIC_SCHEME or not encoded.strip():
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return (username, password)


class BasicAuthMiddleware:
    """Authenticate requests routed to resources flagged ``requires_auth``.

    Parameters
    ----------
    credentials
        Immutable store of bcrypt hashes keyed by username.

    """

    def __init__(self, credentials: CredentialStore) -> None:
        """Initialize the middleware with a credential store."""
        self._credentials = credentials

    async def process_resource(
        self,
        req: Request,
        _resp: Response,
        resource: object,
        _params: dict[str, typ.Any],
    ) -> None:
        """Reject the request unless it carries valid credentials.

        Raises
        ------
        AuthenticationError
            If the header is missing or malformed or the password is wrong.

        """
        if not getattr(resource, "requires_auth", False):
            return

        parsed = parse_basic_auth(req.auth)
        if parsed is None:
            raise AuthenticationError

        username, password = parsed
        # checkpw blocks for the whole hashing cost.
        valid = await asyncio.to_thread(self._credentials.verify, username, password)
        if not valid:
            msg = f"invalid credentials for user {username!r}"
            raise AuthenticationError(msg)
        req.context.username = username


class RequestLoggingMiddleware:
    """Log every request and its response status at DEBUG."""

    async def process_request(self, req: Request, _resp: Response) -> None:
        """Log the remote address, method and URL of ``req``."""
        log_debug(logger, "%s %s %s", req.remote_addr, req.method, req.url)

    async def process_response(
        self,
        req: Request,
        resp: Response,
        _resource: object,
        req_succeeded: bool,  # noqa: FBT001 - Falcon middleware signature requires positional bool
    ) -> None:
        """Log the response status for ``req``."""
        log_debug(
            logger,
            "%s %s -> %s (succeeded=%s)",
            req.method,
            req.path,
            resp.status,
            req_succeeded,
        )
