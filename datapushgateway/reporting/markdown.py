"""Markdown rendering for report documents.

Each record with output becomes one titled block: a level-1 heading with
the record description, followed by a fenced block holding the decoded
payload. Records without output contribute nothing.

Usage
-----
>>> from datapushgateway.reporting.markdown import render_record_block
>>> render_record_block("CPU Load", "95%")
'# CPU Load\\n```\\n95%\\n```\\n'

"""

from __future__ import annotations

import base64
import binascii
import typing as typ

from datapushgateway.errors import RecordError
from datapushgateway.logging import get_logger, log_error

if typ.TYPE_CHECKING:
    from datapushgateway.records.models import Record

logger = get_logger(__name__)

_LINE_BREAKS = str.maketrans("", "", "\r\n")


def _unwrap(payload: str) -> str:
    # Wrapped encoder output (76 columns, CRLF or LF) is still valid base64.
    return payload.translate(_LINE_BREAKS)


def decode_payload(record: Record) -> str:
    """Decode a record's base64 payload into text.

    Invalid UTF-8 sequences are replaced rather than rejected.

    Raises
    ------
    RecordError
        If the payload is not valid base64.

    """
    try:
        raw = base64.b64decode(_unwrap(record.payload), validate=True)
    except (binascii.Error, ValueError) as exc:
        msg = f"cannot decode output of {record.description!r}: {exc}"
        raise RecordError(msg) from exc
    return raw.decode("utf-8", errors="replace")


def render_record_block(description: str, body: str) -> str:
    """Render one titled, fenced block."""
    return f"# {description}\n```\n{body}\n```\n"


def render_document(records: typ.Iterable[Record]) -> str | None:
    """Render already-ordered records into one document.

    Parameters
    ----------
    records
        Records in the order they should appear.

    Returns
    -------
    str | None
        The Markdown document, or ``None`` when no record produced a block.

    """
    blocks: list[str] = []
    for record in records:
        if not record.has_payload:
            continue
        try:
            body = decode_payload(record)
        except RecordError as exc:
            log_error(logger, "Skipping record: %s", exc)
            continue
        blocks.append(render_record_block(record.description, body))

    if not blocks:
        return None
    return "".join(blocks)
