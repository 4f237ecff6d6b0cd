"""Render classified records into Markdown documents on disk.

The renderer walks the taxonomy in declared order. For each document it
orders the records by the position of their tag in that document's tag
list (stable, so records sharing a tag keep their arrival order), renders
the blocks, and writes or removes the file through a ``DocumentSink``.

Failures are contained: a record that cannot be decoded is skipped, and a
directory or file that cannot be written fails only its own document.

Usage
-----
>>> from pathlib import Path
>>> from datapushgateway.reporting import FilesystemDocumentSink, ReportRenderer
>>> renderer = ReportRenderer(FilesystemDocumentSink(Path("data")))
>>> result = renderer.render(group, taxonomy, customer_id="acme")
>>> result.produced
2

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from datapushgateway.errors import DocumentWriteError
from datapushgateway.logging import get_logger, log_debug, log_error, log_info

from .markdown import render_document
from .sink import DocumentLocation

if typ.TYPE_CHECKING:
    from pathlib import Path

    from datapushgateway.records.classifier import DocumentGroup
    from datapushgateway.records.models import Record
    from datapushgateway.taxonomy.models import Taxonomy, TaxonomyEntry

    from .sink import DocumentSink

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class DocumentFailure:
    """A document that could not be produced.

    Attributes
    ----------
    document
        Document name from the taxonomy.
    reason
        Human-readable description of the failure.

    """

    document: str
    reason: str


@dc.dataclass(frozen=True, slots=True)
class RenderResult:
    """Outcome of rendering one document group.

    Attributes
    ----------
    written
        Paths of documents written this run, in taxonomy order.
    removed
        Paths of stale documents deleted because no record had output.
    skipped
        Document names that received no records and were left untouched.
    failures
        Documents whose directory or file could not be written.

    """

    written: tuple[Path, ...] = ()
    removed: tuple[Path, ...] = ()
    skipped: tuple[str, ...] = ()
    failures: tuple[DocumentFailure, ...] = ()

    @property
    def produced(self) -> int:
        """Number of documents that now hold rendered content."""
        return len(self.written)


def order_records(records: typ.Iterable[Record], entry: TaxonomyEntry) -> list[Record]:
    """Stable-sort records by their tag's position in ``entry``.

    Tags are compared case-insensitively, matching classification.
    """
    return sorted(records, key=lambda record: entry.tag_index(record.tag))


@dc.dataclass(slots=True)
class _RenderState:
    written: list[Path] = dc.field(default_factory=list)
    removed: list[Path] = dc.field(default_factory=list)
    skipped: list[str] = dc.field(default_factory=list)
    failures: list[DocumentFailure] = dc.field(default_factory=list)

    def freeze(self) -> RenderResult:
        return RenderResult(
            written=tuple(self.written),
            removed=tuple(self.removed),
            skipped=tuple(self.skipped),
            failures=tuple(self.failures),
        )


class ReportRenderer:
    """Write one Markdown document per taxonomy entry.

    Parameters
    ----------
    sink
        Destination for rendered documents.

    """

    def __init__(self, sink: DocumentSink) -> None:
        """Configure the renderer with its document sink."""
        self._sink = sink

    def render(
        self,
        group: DocumentGroup,
        taxonomy: Taxonomy,
        *,
        customer_id: str,
    ) -> RenderResult:
        """Render every document of ``taxonomy`` for one customer.

        Parameters
        ----------
        group
            Records per document name, as produced by ``classify``.
        taxonomy
            Taxonomy with placeholders already resolved.
        customer_id
            Customer whose workspace receives the documents.

        Returns
        -------
        RenderResult
            Written, removed, skipped and failed documents.

        """
        state = _RenderState()
        for entry in taxonomy.entries:
            location = DocumentLocation(
                customer_id=customer_id,
                placement_path=entry.placement_path,
                document_name=entry.document_name,
            )
            try:
                records = group.get(entry.document_name, [])
                self._render_entry(entry, location, records, state)
            except DocumentWriteError as exc:
                log_error(
                    logger, "Failed to render %s: %s", entry.document_name, exc.reason
                )
                state.failures.append(
                    DocumentFailure(document=entry.document_name, reason=exc.reason)
                )

        result = state.freeze()
        log_info(
            logger,
            "Rendered documents for %s: written=%d removed=%d skipped=%d failed=%d",
            customer_id,
            len(result.written),
            len(result.removed),
            len(result.skipped),
            len(result.failures),
        )
        return result

    def _render_entry(
        self,
        entry: TaxonomyEntry,
        location: DocumentLocation,
        records: list[Record],
        state: _RenderState,
    ) -> None:
        self._sink.ensure_directory(location)

        if not records:
            log_debug(logger, "Skipping %s: no records", entry.document_name)
            state.skipped.append(entry.document_name)
            return

        markdown = render_document(order_records(records, entry))
        if markdown is None:
            removed = self._sink.remove_document(location)
            if removed is not None:
                log_info(
                    logger,
                    "Removed stale %s: no record had output",
                    entry.document_name,
                )
                state.removed.append(removed)
            else:
                log_debug(
                    logger, "Skipping %s: no record had output", entry.document_name
                )
            return

        state.written.append(self._sink.write_document(location, markdown))
