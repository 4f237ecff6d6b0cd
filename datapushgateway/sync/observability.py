"""Emit structured observability events for sync sessions.

Usage
-----
>>> event_logger = SyncEventLogger()
>>> event_logger.log_session_started(customer_id="acme", instance_id="web-01")

"""

from __future__ import annotations

import enum
import typing as typ

from datapushgateway.logging import get_logger, log_error, log_info

if typ.TYPE_CHECKING:
    from datapushgateway.sync.agent import SyncReport
    from datapushgateway.sync.errors import SyncError

logger = get_logger(__name__)


class SyncEventType(enum.StrEnum):
    """Structured log event types for sync sessions."""

    SESSION_STARTED = "sync.session.started"
    SESSION_COMPLETED = "sync.session.completed"
    SESSION_FAILED = "sync.session.failed"


class SyncEventLogger:
    """Emit structured sync session events via femtologging."""

    def log_session_started(self, *, customer_id: str, instance_id: str) -> None:
        """Log the start of a session for one customer workspace."""
        log_info(
            logger,
            "[%s] customer=%s instance=%s",
            SyncEventType.SESSION_STARTED,
            customer_id,
            instance_id,
        )

    def log_session_completed(self, report: SyncReport) -> None:
        """Log a session that reached a terminal state.

        Parameters
        ----------
        report
            Outcome and timing of the finished session.

        """
        log_info(
            logger,
            "[%s] customer=%s instance=%s outcome=%s duration_seconds=%.3f",
            SyncEventType.SESSION_COMPLETED,
            report.customer_id,
            report.instance_id,
            report.outcome,
            report.duration_s,
        )

    def log_session_failed(self, error: SyncError, *, duration_s: float) -> None:
        """Log a session aborted at one of its steps.

        Parameters
        ----------
        error
            The failure, carrying the step and the underlying tool error.
        duration_s
            Seconds elapsed between the session start and the failure.

        """
        log_error(
            logger,
            "[%s] customer=%s instance=%s step=%s duration_seconds=%.3f "
            "error_message=%s",
            SyncEventType.SESSION_FAILED,
            error.customer_id,
            error.instance_id,
            error.step,
            duration_s,
            error.reason,
            exc_info=error,
        )


__all__ = ["SyncEventLogger", "SyncEventType"]
