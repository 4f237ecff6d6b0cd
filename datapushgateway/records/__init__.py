"""Incoming monitoring records: decoding, validation and classification.

Example:
>>> from datapushgateway.records import classify, decode_batch, parse_records
>>> batch = parse_records(decode_batch(body))
>>> group = classify(batch.records, taxonomy)

"""

from __future__ import annotations

from .batch import BatchDecodeError, decode_batch, parse_record, parse_records
from .classifier import DocumentGroup, classify
from .models import ParsedBatch, Record

__all__ = [
    "BatchDecodeError",
    "DocumentGroup",
    "ParsedBatch",
    "Record",
    "classify",
    "decode_batch",
    "parse_record",
    "parse_records",
]
