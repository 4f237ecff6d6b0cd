"""Typed structures for the report taxonomy (``sort.yaml``)."""

from __future__ import annotations

import msgspec

from .validation import TaxonomyValidationError, duplicate_document_names

INSTANCE_PLACEHOLDER = "%INSTANCE%"


class TaxonomyEntry(msgspec.Struct, kw_only=True, frozen=True):
    """One report document and the monitor tags routed into it.

    Attributes
    ----------
    document_name : str
        Report file stem; the rendered file is ``<document_name>.md``.
    placement_path : str
        Directory relative to the customer root. May embed ``%INSTANCE%``.
    monitor_tags : tuple[str, ...]
        Tags routed to this document. Their order is the rendering order.

    """

    document_name: str = msgspec.field(name="file_name")
    placement_path: str = msgspec.field(name="directory")
    monitor_tags: tuple[str, ...] = ()

    def tag_index(self, tag: str) -> int:
        """Return the case-insensitive position of ``tag``, or ``-1``."""
        folded = tag.casefold()
        for index, candidate in enumerate(self.monitor_tags):
            if candidate.casefold() == folded:
                return index
        return -1

    def resolve(self, instance_id: str) -> TaxonomyEntry:
        """Return a copy with ``%INSTANCE%`` replaced by ``instance_id``."""
        return TaxonomyEntry(
            document_name=self.document_name.replace(INSTANCE_PLACEHOLDER, instance_id),
            placement_path=self.placement_path.replace(
                INSTANCE_PLACEHOLDER, instance_id
            ),
            monitor_tags=self.monitor_tags,
        )


class Taxonomy(msgspec.Struct, kw_only=True, frozen=True):
    """Ordered collection of report documents.

    The template loaded from disk is shared read-only between requests;
    :meth:`resolve_placeholders` derives the per-run copy.

    Attributes
    ----------
    entries : tuple[TaxonomyEntry, ...]
        Documents in declared order.

    """

    entries: tuple[TaxonomyEntry, ...] = msgspec.field(
        default=(), name="file_configs"
    )

    def resolve_placeholders(self, instance_id: str) -> Taxonomy:
        """Substitute the instance placeholder in every entry.

        Parameters
        ----------
        instance_id
            Instance identifier for the current run.

        Returns
        -------
        Taxonomy
            A new taxonomy; ``self`` is left untouched. Resolving a taxonomy
            that holds no placeholders returns an equal taxonomy.

        Raises
        ------
        TaxonomyValidationError
            If substitution makes two document names equal, for example
            ``web-01`` next to ``%INSTANCE%`` for instance ``web-01``.

        """
        resolved = tuple(entry.resolve(instance_id) for entry in self.entries)
        if duplicates := duplicate_document_names(resolved):
            issues = [
                f"duplicate file_name '{name}' for instance '{instance_id}'"
                for name in duplicates
            ]
            raise TaxonomyValidationError(issues)
        return Taxonomy(entries=resolved)

    def resolve_tag(self, tag: str) -> str | None:
        """Return the first configured tag equal to ``tag`` ignoring case.

        Entries are searched in declared order and tags in list order, so
        the first match wins when two entries spell a tag differently.
        """
        folded = tag.casefold()
        for entry in self.entries:
            for candidate in entry.monitor_tags:
                if candidate.casefold() == folded:
                    return candidate
        return None

    def entries_for_tag(self, tag: str) -> tuple[TaxonomyEntry, ...]:
        """Return every entry whose tag list contains ``tag`` exactly."""
        return tuple(entry for entry in self.entries if tag in entry.monitor_tags)

    @property
    def document_names(self) -> tuple[str, ...]:
        """Document names in declared order."""
        return tuple(entry.document_name for entry in self.entries)
