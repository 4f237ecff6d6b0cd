"""Push gateway runtime entrypoint.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`datapushgateway.api.app.create_app` for application
construction while keeping the ``datapushgateway.runtime:create_app``
entrypoint stable.

When ``DATAPUSHGATEWAY_AUTH_FILE`` is set, the runtime builds the
credential store and ingestion pipeline so the app serves ``/json`` and
``/data``. Otherwise it starts in health-only mode.

Configuration is driven by environment variables:

- ``DATAPUSHGATEWAY_HOST``: Bind address (default ``0.0.0.0``)
- ``DATAPUSHGATEWAY_PORT``: Listen port (default ``9092``)
- ``DATAPUSHGATEWAY_LOG_LEVEL``: Log level (default ``INFO``)
- the pipeline variables read by :class:`~datapushgateway.config.GatewayConfig`

Run the service directly with ``python -m datapushgateway.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from datapushgateway.config import GatewayConfig
from datapushgateway.errors import ConfigError
from datapushgateway.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["DEFAULT_PORT", "create_app", "main"]

logger = get_logger(__name__)

DEFAULT_PORT = 9092

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid DATAPUSHGATEWAY_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    Raises
    ------
    ConfigError
        If the auth file or application config cannot be loaded.
    ValueError
        If a numeric environment variable is invalid.

    """
    from datapushgateway.api.app import create_app as _create_api_app
    from datapushgateway.api.factory import build_app_dependencies

    config = GatewayConfig.from_env()
    try:
        deps = build_app_dependencies(config)
    except ConfigError as exc:
        log_error(logger, "Cannot start the push gateway: %s", exc)
        raise

    if deps.pipeline is None:
        log_warning(
            logger,
            "DATAPUSHGATEWAY_AUTH_FILE is not set; serving health endpoints only",
        )
    else:
        log_info(
            logger,
            "Ingestion enabled: data_dir=%s taxonomy=%s sync_timeout_s=%s",
            config.data_dir,
            config.taxonomy_path,
            config.sync_timeout_s,
        )
    return _create_api_app(deps)


def main() -> None:
    """Start the push gateway server using Granian.

    Reads ``DATAPUSHGATEWAY_HOST``, ``DATAPUSHGATEWAY_PORT``, and
    ``DATAPUSHGATEWAY_LOG_LEVEL`` from the environment and starts the ASGI
    server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("DATAPUSHGATEWAY_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("DATAPUSHGATEWAY_PORT", str(DEFAULT_PORT))
    port = _parse_port(port_str)
    log_level_str = os.environ.get("DATAPUSHGATEWAY_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid DATAPUSHGATEWAY_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting push gateway on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "datapushgateway.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
