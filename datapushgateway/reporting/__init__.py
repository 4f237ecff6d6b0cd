"""Rendering of classified records into Markdown report documents.

Public API
----------
DocumentLocation
    Frozen dataclass naming a document below the sink root.
DocumentSink
    Protocol (port) for writing and removing rendered documents.
FilesystemDocumentSink
    Filesystem adapter for ``DocumentSink`` rooted at the data directory.
RenderResult
    Written, removed, skipped and failed documents for one render call.
ReportRenderer
    Orders records per document and writes them through a sink.
render_document
    Pure function rendering ordered records into Markdown.

Example:
>>> from pathlib import Path
>>> renderer = ReportRenderer(FilesystemDocumentSink(Path("data")))
>>> result = renderer.render(group, taxonomy, customer_id="acme")

"""

from datapushgateway.reporting.filesystem_sink import FilesystemDocumentSink
from datapushgateway.reporting.markdown import (
    decode_payload,
    render_document,
    render_record_block,
)
from datapushgateway.reporting.renderer import (
    DocumentFailure,
    RenderResult,
    ReportRenderer,
    order_records,
)
from datapushgateway.reporting.sink import DocumentLocation, DocumentSink

__all__ = [
    "DocumentFailure",
    "DocumentLocation",
    "DocumentSink",
    "FilesystemDocumentSink",
    "RenderResult",
    "ReportRenderer",
    "decode_payload",
    "order_records",
    "render_document",
    "render_record_block",
]
