"""Push gateway HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application for the push gateway.

Usage
-----
Create and run the application::

    from datapushgateway.api import create_app

    app = create_app()              # banner and health probes only
    app = create_app(dependencies)  # with authenticated ingestion routes

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with the
    banner and health endpoints and, when credentials and a pipeline are
    provided, the ``/json`` and ``/data`` ingestion endpoints.
"""

from datapushgateway.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
