"""YAML 1.2 loading shared by the taxonomy, auth and application configs.

Every configuration artefact the gateway reads is YAML that gets converted
into a ``msgspec.Struct``. This module keeps the parser settings and the
parse-then-convert step in one place so each loader only decides which
error type to raise.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from datapushgateway.errors import ConfigError

YAML_VERSION = (1, 2)

T = typ.TypeVar("T")


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    yaml.default_flow_style = False
    return yaml


def load_yaml_struct(
    path: Path | str,
    type_: type[T],
    *,
    label: str,
    error: type[ConfigError] = ConfigError,
) -> T:
    """Parse a YAML file and convert it into ``type_``.

    Parameters
    ----------
    path
        File to read.
    type_
        ``msgspec`` target type for the parsed document.
    label
        Human-readable artefact name used in error messages.
    error
        ``ConfigError`` subclass to raise on failure.

    Raises
    ------
    ConfigError
        If the file is unreadable, empty, not valid YAML, or does not match
        the schema.

    """
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, YAMLError) as exc:
        msg = f"failed to read {label} {path_obj}: {exc}"
        raise error(msg) from exc

    if loaded is None:
        msg = f"{label} {path_obj} is empty"
        raise error(msg)

    try:
        return msgspec.convert(loaded, type=type_)
    except msgspec.ValidationError as exc:
        msg = f"{label} schema validation failed: {exc}"
        raise error(msg) from exc
