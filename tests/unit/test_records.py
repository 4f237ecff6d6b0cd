"""Unit tests for batch decoding and record parsing."""

from __future__ import annotations

import pytest

from datapushgateway.errors import RecordError
from datapushgateway.records import (
    BatchDecodeError,
    decode_batch,
    parse_record,
    parse_records,
)
from tests.helpers.femtologging_capture import capture_femto_logs


class TestDecodeBatch:
    """Tests for decode_batch."""

    def test_decodes_array(self) -> None:
        """A JSON array is returned as a list."""
        assert decode_batch(b'[{"monitor_tag": "cpu"}]') == [{"monitor_tag": "cpu"}]

    @pytest.mark.parametrize("body", [b"", b"{not json", b'{"monitor_tag": "cpu"}'])
    def test_rejects_non_arrays(self, body: bytes) -> None:
        """Invalid JSON and non-array documents fail the whole request."""
        with pytest.raises(BatchDecodeError):
            decode_batch(body)


class TestParseRecord:
    """Tests for parse_record."""

    def test_maps_wire_names(self) -> None:
        """monitor_tag and output map onto tag and payload."""
        record = parse_record(
            {"monitor_tag": "cpu", "description": "CPU Load", "output": "OTUl"}
        )

        assert record.tag == "cpu"
        assert record.description == "CPU Load"
        assert record.payload == "OTUl"
        assert record.has_payload

    def test_unknown_keys_are_carried(self) -> None:
        """Extra keys survive in ``extra``."""
        record = parse_record({"monitor_tag": "cpu", "command": "uptime"})

        assert record.extra == {"command": "uptime"}
        assert not record.has_payload

    def test_null_fields_count_as_absent(self) -> None:
        """JSON null leaves the default in place."""
        record = parse_record({"monitor_tag": "cpu", "output": None})

        assert record.payload == ""

    @pytest.mark.parametrize(
        ("obj", "reason"),
        [
            (["cpu"], "expected a JSON object"),
            ({"description": "x"}, "missing monitor_tag"),
            ({"monitor_tag": "  "}, "empty monitor_tag"),
            ({"monitor_tag": 7}, "Expected `str`"),
        ],
    )
    def test_rejects_malformed_objects(self, obj: object, reason: str) -> None:
        """Malformed objects raise RecordError with their position."""
        with pytest.raises(RecordError, match=reason) as excinfo:
            parse_record(obj, index=3)

        assert excinfo.value.index == 3


class TestParseRecords:
    """Tests for parse_records."""

    def test_skips_and_counts_malformed_records(self) -> None:
        """One bad record does not reject the batch."""
        with capture_femto_logs("datapushgateway.records.batch") as capture:
            batch = parse_records(
                [
                    {"monitor_tag": "cpu"},
                    {"description": "no tag"},
                    {"monitor_tag": "disk"},
                ]
            )
            capture.wait_for_message("Skipping malformed record")

        assert [record.tag for record in batch.records] == ["cpu", "disk"]
        assert batch.skipped == 1
        assert batch.received == 3
