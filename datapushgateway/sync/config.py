"""Application configuration for the Perforce adapter.

The application config is a small YAML document::

    applicationConfig:
      P4CONFIG: .p4config
      p4bin: /usr/local/bin/p4
      environment:
        P4CHARSET: utf8

``P4CONFIG`` is required. ``p4bin`` defaults to ``p4`` on ``PATH`` and
``environment`` holds extra variables for the child process only.
"""

from __future__ import annotations

import typing as typ

import msgspec

from datapushgateway.common.yaml import load_yaml_struct
from datapushgateway.errors import ConfigError

if typ.TYPE_CHECKING:
    from pathlib import Path

DEFAULT_P4_BINARY = "p4"


class PerforceConfig(msgspec.Struct, kw_only=True, frozen=True):
    """Settings for invoking the Perforce command-line client."""

    p4config: str = msgspec.field(name="P4CONFIG", default="")
    binary: str = msgspec.field(name="p4bin", default=DEFAULT_P4_BINARY)
    environment: dict[str, str] = msgspec.field(default_factory=dict)

    def child_environment(self) -> dict[str, str]:
        """Variables layered over the process environment for each call."""
        overrides = {"P4CONFIG": self.p4config} if self.p4config else {}
        return {**overrides, **self.environment}


class _ApplicationConfigDocument(msgspec.Struct, kw_only=True):
    application: PerforceConfig = msgspec.field(name="applicationConfig")


def validate_perforce_config(config: PerforceConfig) -> PerforceConfig:
    """Return ``config`` unchanged, or raise listing every problem."""
    issues: list[str] = []
    if not config.p4config.strip():
        issues.append("applicationConfig.P4CONFIG must be set")
    if not config.binary.strip():
        issues.append("applicationConfig.p4bin must not be empty")
    issues.extend(
        f"applicationConfig.environment has an empty variable name: {name!r}"
        for name in config.environment
        if not name.strip()
    )
    if issues:
        raise ConfigError(issues)
    return config


def load_perforce_config(path: Path | str) -> PerforceConfig:
    """Load and validate the application config at ``path``.

    Raises
    ------
    ConfigError
        If the file is missing, malformed or lacks ``P4CONFIG``.

    """
    document = load_yaml_struct(
        path, _ApplicationConfigDocument, label="application config"
    )
    return validate_perforce_config(document.application)


__all__ = [
    "DEFAULT_P4_BINARY",
    "PerforceConfig",
    "load_perforce_config",
    "validate_perforce_config",
]
