"""DocumentSink protocol for persisting rendered Markdown documents.

This module defines the port (in hexagonal architecture terms) for report
output. The renderer decides *what* each document contains; a sink decides
*where* it lives. The filesystem adapter writes into the Perforce workspace
so the sync agent can pick the files up.

The protocol is ``runtime_checkable`` to support ``isinstance`` checks in
tests that swap in failing sinks.

Usage
-----
Type-check a concrete adapter:

>>> from pathlib import Path
>>> from datapushgateway.reporting.sink import DocumentSink
>>> from datapushgateway.reporting.filesystem_sink import FilesystemDocumentSink
>>> isinstance(FilesystemDocumentSink(Path(".")), DocumentSink)
True

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass(frozen=True, slots=True)
class DocumentLocation:
    """Where one rendered document lives below the sink root.

    Attributes
    ----------
    customer_id
        Customer whose workspace receives the document.
    placement_path
        Directory relative to the customer workspace, placeholders resolved.
    document_name
        File stem; the file is ``<document_name>.md``.

    """

    customer_id: str
    placement_path: str
    document_name: str

    @property
    def filename(self) -> str:
        """Markdown file name for the document."""
        return f"{self.document_name}.md"


@typ.runtime_checkable
class DocumentSink(typ.Protocol):
    """Protocol for storing and removing rendered documents."""

    def ensure_directory(self, location: DocumentLocation) -> Path:
        """Create the document's directory if needed and return it."""
        ...

    def write_document(self, location: DocumentLocation, markdown: str) -> Path:
        """Write (or overwrite) the document and return its path."""
        ...

    def remove_document(self, location: DocumentLocation) -> Path | None:
        """Delete the document if present; return the removed path or ``None``."""
        ...
