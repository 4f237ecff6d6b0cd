"""Banner and health probe resources.

These resources are stateless and need no credentials. They are always
registered, including when the gateway runs without an auth file.

Usage
-----
Register the endpoints on the Falcon app::

    from datapushgateway.api.health.resources import (
        HealthResource,
        ReadyResource,
        RootResource,
    )

    app.add_route("/", RootResource())
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["BANNER", "HealthResource", "ReadyResource", "RootResource"]

BANNER = "Data PushGateway\n"


class RootResource:
    """Plain-text banner identifying the service."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET / requests."""
        resp.content_type = falcon.MEDIA_TEXT
        resp.text = BANNER
        resp.status = HTTPStatus.OK


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with liveness status.

        """
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe reporting whether ingestion routes are mounted.

    Parameters
    ----------
    ingest_enabled
        Whether the app was built with credentials and a pipeline.

    """

    def __init__(self, *, ingest_enabled: bool = False) -> None:
        """Configure the probe with the app's ingestion mode."""
        self._ingest_enabled = ingest_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        resp.media = {"status": "ready", "ingest": self._ingest_enabled}
        resp.status = HTTPStatus.OK
