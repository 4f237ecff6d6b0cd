"""Report taxonomy: which monitor tags land in which Markdown document.

A taxonomy file lists report documents in the order they are rendered::

    file_configs:
      - file_name: health
        directory: "%INSTANCE%/checks"
        monitor_tags: [cpu, mem]

Quick examples
--------------

    >>> from datapushgateway.taxonomy import load_taxonomy
    >>> template = load_taxonomy("mdconfigs/sort.yaml")
    >>> run_taxonomy = template.resolve_placeholders("master")
"""

from __future__ import annotations

from .loader import load_taxonomy
from .models import INSTANCE_PLACEHOLDER, Taxonomy, TaxonomyEntry
from .schema import build_taxonomy_schema, write_taxonomy_schema
from .validation import TaxonomyValidationError, validate_taxonomy

__all__ = [
    "INSTANCE_PLACEHOLDER",
    "Taxonomy",
    "TaxonomyEntry",
    "TaxonomyValidationError",
    "build_taxonomy_schema",
    "load_taxonomy",
    "validate_taxonomy",
    "write_taxonomy_schema",
]
