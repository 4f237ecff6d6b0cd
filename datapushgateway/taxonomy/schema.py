"""JSON Schema generation for taxonomy files."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path  # noqa: TC003

import msgspec

from .models import Taxonomy

SCHEMA_ID = "https://datapushgateway.example/schemas/taxonomy.json"


def build_taxonomy_schema() -> dict[str, typ.Any]:
    """Build the JSON Schema describing ``sort.yaml``, with ``$id`` set."""
    schema = msgspec.json.schema(Taxonomy)
    schema["$id"] = SCHEMA_ID
    return schema


def write_taxonomy_schema(path: Path) -> Path:
    """Persist the generated JSON Schema to disk, creating parent directories.

    Parameters
    ----------
    path : Path
        Destination path for the schema JSON file.

    Returns
    -------
    Path
        The path written to, for convenience in call chains.

    """
    schema = build_taxonomy_schema()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(schema, indent=2), encoding="utf-8")
    return path
