"""Validation rules for the report taxonomy."""

from __future__ import annotations

import typing as typ
from pathlib import PurePosixPath

from datapushgateway.errors import ConfigError

if typ.TYPE_CHECKING:
    from .models import Taxonomy, TaxonomyEntry


class TaxonomyValidationError(ConfigError):
    """Raised when a taxonomy fails structural validation."""


def validate_taxonomy(taxonomy: Taxonomy) -> Taxonomy:
    """Validate a taxonomy, returning it when all checks pass.

    Document names must be unique (exact string comparison). Tags are matched
    case-insensitively during classification, but uniqueness is not enforced
    for them: the same tag may feed several documents.

    Raises
    ------
    TaxonomyValidationError
        With every issue found, not only the first.

    """
    issues: list[str] = []

    if not taxonomy.entries:
        issues.append("taxonomy defines no file_configs")

    for position, entry in enumerate(taxonomy.entries):
        label = entry.document_name or f"file_configs[{position}]"
        _validate_entry(entry, label, issues)

    issues.extend(
        f"duplicate file_name '{name}'"
        for name in duplicate_document_names(taxonomy.entries)
    )

    if issues:
        raise TaxonomyValidationError(issues)

    return taxonomy


def duplicate_document_names(entries: typ.Iterable[TaxonomyEntry]) -> list[str]:
    """Return non-empty document names declared more than once, in order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for entry in entries:
        name = entry.document_name
        if not name:
            continue
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates


def _validate_entry(entry: TaxonomyEntry, label: str, issues: list[str]) -> None:
    if not entry.document_name.strip():
        issues.append(f"{label} is missing a file_name")
    elif "/" in entry.document_name or "\\" in entry.document_name:
        issues.append(f"{label}: file_name must not contain path separators")

    if not entry.placement_path.strip():
        issues.append(f"{label} is missing a directory")
    else:
        _validate_placement(entry.placement_path, label, issues)

    for tag in entry.monitor_tags:
        if not tag.strip():
            issues.append(f"{label} lists an empty monitor tag")


def _validate_placement(placement: str, label: str, issues: list[str]) -> None:
    path = PurePosixPath(placement.replace("\\", "/"))
    if path.is_absolute():
        issues.append(f"{label}: directory '{placement}' must be relative")
    if ".." in path.parts:
        issues.append(f"{label}: directory '{placement}' must not contain '..'")
