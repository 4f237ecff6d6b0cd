"""Unit tests for RepositorySyncAgent."""

from __future__ import annotations

import typing as typ

import pytest

from datapushgateway.sync import (
    RepositorySyncAgent,
    SyncError,
    SyncOutcome,
    SyncStep,
    SyncToolError,
    submit_message,
)
from tests.helpers.femtologging_capture import capture_femto_logs

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tests.helpers.fakes import FakeSyncTool

FULL_SEQUENCE = [
    "stage",
    "synchronize",
    "resolve_own",
    "has_local_changes",
    "commit",
]


def test_submit_message() -> None:
    """The changelist description names customer and instance."""
    assert submit_message("acme", "web-01") == (
        "Customer: acme, Instance: web-01, monitoring submit"
    )


class TestRepositorySyncAgent:
    """Tests for the sync session sequence."""

    def test_runs_every_step_and_submits(
        self, fake_tool: FakeSyncTool, tmp_path: Path
    ) -> None:
        """Local changes lead to a submit of the customer workspace."""
        report = RepositorySyncAgent(fake_tool).sync("acme", "web-01", tmp_path)

        assert fake_tool.operations == FULL_SEQUENCE
        assert all(args[0] == tmp_path / "acme" for _, args in fake_tool.calls)
        assert fake_tool.calls[-1][1][1] == submit_message("acme", "web-01")
        assert report.outcome is SyncOutcome.SUBMITTED
        assert report.submitted
        assert report.workspace == tmp_path / "acme"
        assert report.duration_s >= 0

    def test_no_changes_skips_submit(
        self, fake_tool: FakeSyncTool, tmp_path: Path
    ) -> None:
        """Nothing opened means no changelist."""
        fake_tool.changes = False

        report = RepositorySyncAgent(fake_tool).sync("acme", "web-01", tmp_path)

        assert fake_tool.operations == FULL_SEQUENCE[:-1]
        assert report.outcome is SyncOutcome.NO_CHANGES
        assert not report.submitted

    @pytest.mark.parametrize(
        ("operation", "step"),
        [
            ("stage", SyncStep.STAGE),
            ("synchronize", SyncStep.SYNC),
            ("resolve_own", SyncStep.RESOLVE),
            ("has_local_changes", SyncStep.STATUS),
            ("commit", SyncStep.SUBMIT),
        ],
    )
    def test_failure_stops_at_step(
        self,
        fake_tool: FakeSyncTool,
        tmp_path: Path,
        operation: str,
        step: SyncStep,
    ) -> None:
        """The failing step is reported and later steps never run."""
        fake_tool.failures[operation] = SyncToolError.exited(
            operation, 1, "Perforce client error"
        )

        with pytest.raises(SyncError) as excinfo:
            RepositorySyncAgent(fake_tool).sync("acme", "web-01", tmp_path)

        error = excinfo.value
        assert error.step is step
        assert error.code == f"{step}-failed"
        assert (error.customer_id, error.instance_id) == ("acme", "web-01")
        assert fake_tool.operations[-1] == operation
        assert len(fake_tool.operations) == FULL_SEQUENCE.index(operation) + 1
        assert isinstance(error.__cause__, SyncToolError)

    def test_timeout_is_reported_as_step_failure(
        self, fake_tool: FakeSyncTool, tmp_path: Path
    ) -> None:
        """A timed-out invocation fails its step like any other error."""
        fake_tool.failures["synchronize"] = SyncToolError.timeout("sync", 30)

        with pytest.raises(SyncError, match="sync-failed for acme/web-01") as excinfo:
            RepositorySyncAgent(fake_tool).sync("acme", "web-01", tmp_path)

        assert "timed out" in excinfo.value.reason


class TestSessionEvents:
    """Tests for session lifecycle logging."""

    def test_completed_session_is_logged(
        self, fake_tool: FakeSyncTool, tmp_path: Path
    ) -> None:
        """Start and completion events carry the session identity."""
        with capture_femto_logs("datapushgateway.sync.observability") as capture:
            RepositorySyncAgent(fake_tool).sync("acme", "web-01", tmp_path)
            started = capture.wait_for_message("[sync.session.started]")
            completed = capture.wait_for_message("[sync.session.completed]")

        assert "customer=acme instance=web-01" in started.message
        assert "outcome=submitted" in completed.message

    def test_failed_session_is_logged_as_error(
        self, fake_tool: FakeSyncTool, tmp_path: Path
    ) -> None:
        """A failure is logged with its step before propagating."""
        fake_tool.failures["stage"] = SyncToolError.exited("rec", 1, "")

        with (
            capture_femto_logs("datapushgateway.sync.observability") as capture,
            pytest.raises(SyncError),
        ):
            RepositorySyncAgent(fake_tool).sync("acme", "web-01", tmp_path)

        record = capture.wait_for_message("[sync.session.failed]")
        assert record.level == "ERROR"
        assert "step=stage" in record.message
