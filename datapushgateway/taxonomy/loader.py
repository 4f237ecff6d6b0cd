"""YAML loader for taxonomy files."""

from __future__ import annotations

import typing as typ

from datapushgateway.common.yaml import load_yaml_struct

from .models import Taxonomy
from .validation import TaxonomyValidationError, validate_taxonomy

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_taxonomy(path: Path | str) -> Taxonomy:
    """Parse and validate a YAML taxonomy file in one step."""
    taxonomy = load_yaml_struct(
        path,
        Taxonomy,
        label="taxonomy",
        error=TaxonomyValidationError,
    )
    return validate_taxonomy(taxonomy)
