"""Unit tests for taxonomy loading, validation and placeholder resolution."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from datapushgateway.errors import ConfigError
from datapushgateway.taxonomy import (
    Taxonomy,
    TaxonomyEntry,
    TaxonomyValidationError,
    load_taxonomy,
    validate_taxonomy,
)
from datapushgateway.taxonomy.schema import SCHEMA_ID, write_taxonomy_schema


def _entry(name: str, directory: str = "reports", *tags: str) -> TaxonomyEntry:
    return TaxonomyEntry(
        document_name=name, placement_path=directory, monitor_tags=tags
    )


class TestLoadTaxonomy:
    """Tests for load_taxonomy."""

    def test_loads_entries_in_declared_order(self, taxonomy_path: Path) -> None:
        """Wire names map onto the typed entries."""
        taxonomy = load_taxonomy(taxonomy_path)

        assert taxonomy.document_names == ("health", "storage")
        assert taxonomy.entries[0].placement_path == "%INSTANCE%/checks"
        assert taxonomy.entries[1].monitor_tags == ("disk", "memory")

    def test_missing_file_is_config_error(self, tmp_path: Path) -> None:
        """An unreadable file raises the taxonomy error."""
        with pytest.raises(TaxonomyValidationError, match="failed to read taxonomy"):
            load_taxonomy(tmp_path / "absent.yaml")

    def test_non_utf8_file_is_config_error(self, tmp_path: Path) -> None:
        """Undecodable bytes are reported as a configuration error."""
        path = tmp_path / "sort.yaml"
        path.write_bytes(b"file_configs:\n  - file_name: h\xff\n")

        with pytest.raises(TaxonomyValidationError, match="failed to read taxonomy"):
            load_taxonomy(path)

    def test_empty_file_is_config_error(self, tmp_path: Path) -> None:
        """An empty document is rejected."""
        path = tmp_path / "sort.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ConfigError, match="is empty"):
            load_taxonomy(path)

    def test_duplicate_yaml_keys_are_rejected(self, tmp_path: Path) -> None:
        """Duplicate keys are a parse error rather than last-one-wins."""
        path = tmp_path / "sort.yaml"
        path.write_text(
            "file_configs:\n"
            "  - file_name: a\n"
            "    file_name: b\n"
            "    directory: x\n",
            encoding="utf-8",
        )

        with pytest.raises(TaxonomyValidationError):
            load_taxonomy(path)

    def test_schema_mismatch_is_reported(self, tmp_path: Path) -> None:
        """A missing required field fails schema conversion."""
        path = tmp_path / "sort.yaml"
        path.write_text("file_configs:\n  - file_name: a\n", encoding="utf-8")

        with pytest.raises(TaxonomyValidationError, match="schema validation"):
            load_taxonomy(path)


class TestValidateTaxonomy:
    """Tests for validate_taxonomy."""

    def test_collects_every_issue(self) -> None:
        """All problems are reported together."""
        taxonomy = Taxonomy(
            entries=(
                _entry("health", "/etc", "cpu"),
                _entry("health", "a/../b", ""),
                _entry("bad/name", ""),
            )
        )

        with pytest.raises(TaxonomyValidationError) as excinfo:
            validate_taxonomy(taxonomy)

        issues = excinfo.value.issues
        assert "duplicate file_name 'health'" in issues
        assert any("must be relative" in issue for issue in issues)
        assert any("must not contain '..'" in issue for issue in issues)
        assert any("empty monitor tag" in issue for issue in issues)
        assert any("path separators" in issue for issue in issues)
        assert any("missing a directory" in issue for issue in issues)

    def test_rejects_empty_taxonomy(self) -> None:
        """A taxonomy needs at least one document."""
        with pytest.raises(TaxonomyValidationError, match="no file_configs"):
            validate_taxonomy(Taxonomy())

    def test_document_names_differing_in_case_are_distinct(self) -> None:
        """Uniqueness is an exact comparison."""
        taxonomy = Taxonomy(entries=(_entry("Health"), _entry("health")))

        assert validate_taxonomy(taxonomy) is taxonomy

    def test_shared_tags_are_allowed(self) -> None:
        """One tag may feed several documents."""
        taxonomy = Taxonomy(
            entries=(_entry("a", "x", "memory"), _entry("b", "y", "memory"))
        )

        assert validate_taxonomy(taxonomy) is taxonomy


class TestPlaceholders:
    """Tests for resolve_placeholders."""

    def test_substitutes_instance_in_directory_and_name(self) -> None:
        """Every occurrence of the placeholder is replaced."""
        taxonomy = Taxonomy(
            entries=(_entry("%INSTANCE%-summary", "%INSTANCE%/%INSTANCE%", "cpu"),)
        )

        resolved = taxonomy.resolve_placeholders("web-01")

        assert resolved.entries[0].document_name == "web-01-summary"
        assert resolved.entries[0].placement_path == "web-01/web-01"

    def test_template_is_left_untouched(self) -> None:
        """Resolution derives a new taxonomy."""
        taxonomy = Taxonomy(entries=(_entry("health", "%INSTANCE%", "cpu"),))

        taxonomy.resolve_placeholders("web-01")

        assert taxonomy.entries[0].placement_path == "%INSTANCE%"

    def test_resolution_without_placeholders_is_identity(self) -> None:
        """Resolving twice, or without placeholders, gives an equal taxonomy."""
        taxonomy = Taxonomy(entries=(_entry("health", "fixed", "cpu"),))

        once = taxonomy.resolve_placeholders("web-01")

        assert once == taxonomy
        assert once.resolve_placeholders("db-02") == once


    def test_names_colliding_after_substitution_are_rejected(self) -> None:
        """A literal name equal to the resolved placeholder is a duplicate."""
        taxonomy = Taxonomy(
            entries=(
                _entry("web-01", "fixed", "cpu"),
                _entry("%INSTANCE%", "%INSTANCE%", "disk"),
            )
        )

        assert taxonomy.resolve_placeholders("db-02").document_names == (
            "web-01",
            "db-02",
        )
        with pytest.raises(TaxonomyValidationError) as excinfo:
            taxonomy.resolve_placeholders("web-01")

        assert excinfo.value.issues == [
            "duplicate file_name 'web-01' for instance 'web-01'"
        ]


class TestTagLookup:
    """Tests for resolve_tag, entries_for_tag and tag_index."""

    def test_resolve_tag_ignores_case_and_returns_configured_spelling(self) -> None:
        """The configured spelling is returned."""
        taxonomy = Taxonomy(entries=(_entry("health", "x", "CPU"),))

        assert taxonomy.resolve_tag("cpu") == "CPU"
        assert taxonomy.resolve_tag("disk") is None

    def test_first_spelling_wins(self) -> None:
        """Entries are searched in declared order."""
        taxonomy = Taxonomy(
            entries=(_entry("a", "x", "Memory"), _entry("b", "y", "MEMORY"))
        )

        assert taxonomy.resolve_tag("memory") == "Memory"
        assert [e.document_name for e in taxonomy.entries_for_tag("Memory")] == ["a"]

    def test_tag_index(self) -> None:
        """Positions are case-insensitive; unknown tags sort first."""
        entry = _entry("health", "x", "cpu", "memory")

        assert entry.tag_index("MEMORY") == 1
        assert entry.tag_index("disk") == -1


def test_write_schema(tmp_path: Path) -> None:
    """The exported schema carries the identifier and wire names."""
    path = write_taxonomy_schema(tmp_path / "out" / "taxonomy.schema.json")

    schema = json.loads(path.read_text(encoding="utf-8"))
    assert schema["$id"] == SCHEMA_ID
    assert "file_configs" in json.dumps(schema)


def test_shipped_taxonomy_is_valid() -> None:
    """The default ``mdconfigs/sort.yaml`` loads cleanly."""
    path = Path(__file__).parents[2] / "mdconfigs" / "sort.yaml"

    taxonomy = load_taxonomy(path)

    assert "system" in taxonomy.document_names()
