"""Application factory for the push gateway Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with the banner and health endpoints and, when credentials and
a pipeline are available, the authenticated ingestion endpoints.

Usage
-----
Create a health-only app (no auth file)::

    app = create_app()

Create a full app with ingestion endpoints::

    from datapushgateway.api.app import AppDependencies, create_app

    deps = AppDependencies(credentials=credentials, pipeline=pipeline)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from datapushgateway.api.errors import register_error_handlers
from datapushgateway.api.health.resources import (
    HealthResource,
    ReadyResource,
    RootResource,
)
from datapushgateway.api.middleware import RequestLoggingMiddleware

if typ.TYPE_CHECKING:
    from datapushgateway.auth.credentials import CredentialStore
    from datapushgateway.pipeline.service import PushPipeline

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    When ``credentials`` and ``pipeline`` are both provided, the
    application includes basic-auth middleware and the ingestion
    endpoints. Otherwise only the banner and health endpoints are
    registered.

    Attributes
    ----------
    credentials
        Immutable store of basic-auth users.
    pipeline
        Pipeline rendering and syncing customer workspaces.

    """

    credentials: CredentialStore | None = None
    pipeline: PushPipeline | None = None


def _has_domain_deps(deps: AppDependencies | None) -> bool:
    """Return True when deps provide both credentials and a pipeline."""
    return (
        deps is not None
        and deps.credentials is not None
        and deps.pipeline is not None
    )


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None``, only the banner
        and health endpoints are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    domain = _has_domain_deps(dependencies) and dependencies is not None
    middleware: list[object] = [RequestLoggingMiddleware()]

    if domain:
        from datapushgateway.api.middleware import BasicAuthMiddleware

        credentials = typ.cast("CredentialStore", dependencies.credentials)
        middleware.append(BasicAuthMiddleware(credentials))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs
    app.req_options.strip_url_path_trailing_slash = True

    app.add_route("/", RootResource())
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(ingest_enabled=domain))

    if domain:
        from datapushgateway.api.ingest.resources import (
            DataUploadResource,
            JsonIngestResource,
        )

        pipeline = typ.cast("PushPipeline", dependencies.pipeline)
        app.add_route("/json", JsonIngestResource(pipeline))
        app.add_route("/data", DataUploadResource(pipeline))

    register_error_handlers(app)
    return app
