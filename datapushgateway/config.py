"""Gateway configuration read from the environment.

Usage
-----
Create a configuration with defaults:

>>> config = GatewayConfig()
>>> config.data_dir
PosixPath('data')

Or load from environment variables:

>>> import os
>>> os.environ["DATAPUSHGATEWAY_SYNC_TIMEOUT_S"] = "30"
>>> GatewayConfig.from_env().sync_timeout_s
30.0

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

DEFAULT_DATA_DIR = Path("data")
DEFAULT_TAXONOMY_PATH = Path("mdconfigs/sort.yaml")
DEFAULT_SYNC_TIMEOUT_S = 120.0


@dc.dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Locations and limits for the ingestion pipeline.

    Attributes
    ----------
    data_dir
        Root of the per-customer workspaces. Default ``data``.
    taxonomy_path
        Tag taxonomy YAML, reread on every request.
        Default ``mdconfigs/sort.yaml``.
    auth_file
        Basic-auth YAML. When ``None`` the ingestion routes are not mounted
        and only the health probes are served.
    config_path
        Application config holding the Perforce settings. When ``None`` the
        ``p4`` binary runs with ``P4CONFIG`` unset by the gateway.
    sync_timeout_s
        Upper bound for each version-control invocation. Default 120 seconds.

    """

    data_dir: Path = DEFAULT_DATA_DIR
    taxonomy_path: Path = DEFAULT_TAXONOMY_PATH
    auth_file: Path | None = None
    config_path: Path | None = None
    sync_timeout_s: float = DEFAULT_SYNC_TIMEOUT_S

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        """Read a positive number env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ValueError(msg) from exc
        if not value > 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _optional_path(env_var: str) -> Path | None:
        raw = os.environ.get(env_var, "")
        return Path(raw.strip()) if raw.strip() else None

    @classmethod
    def from_env(cls) -> GatewayConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``DATAPUSHGATEWAY_DATA_DIR``: workspace root.
        - ``DATAPUSHGATEWAY_TAXONOMY_PATH``: taxonomy YAML.
        - ``DATAPUSHGATEWAY_AUTH_FILE``: optional basic-auth YAML.
        - ``DATAPUSHGATEWAY_CONFIG``: optional application config YAML.
        - ``DATAPUSHGATEWAY_SYNC_TIMEOUT_S``: per-invocation timeout in
          seconds. Must be a positive number.

        Raises
        ------
        ValueError
            If ``DATAPUSHGATEWAY_SYNC_TIMEOUT_S`` is not a positive number.

        """
        return cls(
            data_dir=cls._optional_path("DATAPUSHGATEWAY_DATA_DIR") or DEFAULT_DATA_DIR,
            taxonomy_path=cls._optional_path("DATAPUSHGATEWAY_TAXONOMY_PATH")
            or DEFAULT_TAXONOMY_PATH,
            auth_file=cls._optional_path("DATAPUSHGATEWAY_AUTH_FILE"),
            config_path=cls._optional_path("DATAPUSHGATEWAY_CONFIG"),
            sync_timeout_s=cls._parse_positive_float(
                "DATAPUSHGATEWAY_SYNC_TIMEOUT_S", DEFAULT_SYNC_TIMEOUT_S
            ),
        )


__all__ = ["GatewayConfig"]
