"""Decode request bodies into ``Record`` batches.

A malformed body is a request-level failure (:class:`BatchDecodeError`).
A malformed object inside an otherwise valid array is only a per-record
problem: it is logged, counted and skipped.
"""

from __future__ import annotations

import typing as typ

import msgspec

from datapushgateway.errors import GatewayError, RecordError
from datapushgateway.logging import get_logger, log_warning

from .models import RECORD_FIELDS, ParsedBatch, Record

logger = get_logger(__name__)


class BatchDecodeError(GatewayError):
    """Raised when a request body is not a JSON array."""


def decode_batch(body: bytes) -> list[typ.Any]:
    """Decode a JSON request body into a list of raw objects.

    Raises
    ------
    BatchDecodeError
        If the body is not valid JSON or its top level is not an array.

    """
    try:
        return msgspec.json.decode(body, type=list[typ.Any])
    except msgspec.DecodeError as exc:
        msg = f"failed to decode JSON batch: {exc}"
        raise BatchDecodeError(msg) from exc


def parse_record(obj: object, *, index: int | None = None) -> Record:
    """Convert one decoded JSON object into a :class:`Record`.

    Raises
    ------
    RecordError
        If the object is not a mapping, lacks ``monitor_tag`` or carries
        fields of the wrong type.

    """
    if not isinstance(obj, dict):
        raise RecordError("expected a JSON object", index=index)

    # JSON null counts as an absent field.
    known = {
        key: value
        for key, value in obj.items()
        if key in RECORD_FIELDS and value is not None
    }
    extra = {key: value for key, value in obj.items() if key not in RECORD_FIELDS}
    if "monitor_tag" not in known:
        raise RecordError("missing monitor_tag", index=index)

    try:
        record = msgspec.convert(known, type=Record)
    except msgspec.ValidationError as exc:
        raise RecordError(str(exc), index=index) from exc

    if not record.tag.strip():
        raise RecordError("empty monitor_tag", index=index)

    return Record(
        tag=record.tag,
        description=record.description,
        payload=record.payload,
        extra=extra,
    )


def parse_records(objects: typ.Iterable[object]) -> ParsedBatch:
    """Convert decoded objects into records, skipping malformed ones."""
    records: list[Record] = []
    skipped = 0
    for index, obj in enumerate(objects, start=1):
        try:
            records.append(parse_record(obj, index=index))
        except RecordError as exc:
            skipped += 1
            log_warning(logger, "Skipping malformed record: %s", exc)
    return ParsedBatch(records=tuple(records), skipped=skipped)
