"""Reconcile a customer's report directory with the shared depot.

A session walks a fixed sequence of steps against one customer workspace::

    stage -> sync -> resolve -> status -> (submit | no changes)

The first failing step aborts the session with :class:`SyncError`; no later
step runs and nothing is retried. When the status check finds nothing
opened, the session ends without a submit, so identical uploads never
create empty changelists.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import time
import typing as typ

from datapushgateway.sync.errors import SyncError, SyncStep, SyncToolError
from datapushgateway.sync.observability import SyncEventLogger

if typ.TYPE_CHECKING:
    from pathlib import Path

    from datapushgateway.sync.protocol import SyncTool

T = typ.TypeVar("T")


class SyncOutcome(enum.StrEnum):
    """Terminal states of a successful session."""

    SUBMITTED = "submitted"
    NO_CHANGES = "no_changes"


@dc.dataclass(frozen=True, slots=True)
class SyncReport:
    """Result of a session that reached a terminal state."""

    customer_id: str
    instance_id: str
    workspace: Path
    outcome: SyncOutcome
    duration_s: float

    @property
    def submitted(self) -> bool:
        """Whether a changelist was submitted."""
        return self.outcome is SyncOutcome.SUBMITTED


def submit_message(customer_id: str, instance_id: str) -> str:
    """Return the changelist description for a session."""
    return f"Customer: {customer_id}, Instance: {instance_id}, monitoring submit"


@dc.dataclass(slots=True)
class SyncSession:
    """Bookkeeping for one in-flight session."""

    customer_id: str
    instance_id: str
    workspace: Path
    started_at: float = dc.field(default_factory=time.perf_counter)

    def elapsed(self) -> float:
        """Seconds since the session started."""
        return time.perf_counter() - self.started_at

    def fail(self, step: SyncStep, exc: SyncToolError) -> SyncError:
        """Build the error that aborts this session at ``step``."""
        return SyncError(
            step,
            customer_id=self.customer_id,
            instance_id=self.instance_id,
            reason=str(exc),
        )


class RepositorySyncAgent:
    """Run sync sessions through a :class:`SyncTool`.

    Parameters
    ----------
    tool
        Version-control adapter; usually a ``PerforceSyncTool``.
    event_logger
        Receives session lifecycle events. Defaults to ``SyncEventLogger``.

    """

    def __init__(
        self,
        tool: SyncTool,
        *,
        event_logger: SyncEventLogger | None = None,
    ) -> None:
        """Initialise the agent with a tool and an optional event logger."""
        self._tool = tool
        self._events = event_logger or SyncEventLogger()

    def sync(
        self,
        customer_id: str,
        instance_id: str,
        working_root: Path,
    ) -> SyncReport:
        """Synchronise ``working_root / customer_id`` with the depot.

        Parameters
        ----------
        customer_id
            Customer whose workspace is reconciled.
        instance_id
            Instance that triggered the session, quoted in the submit message.
        working_root
            Directory holding one workspace per customer.

        Returns
        -------
        SyncReport
            ``SUBMITTED`` when a changelist was submitted, else ``NO_CHANGES``.

        Raises
        ------
        SyncError
            If any step fails or times out; ``error.step`` names it.

        """
        session = SyncSession(customer_id, instance_id, working_root / customer_id)
        self._events.log_session_started(
            customer_id=customer_id, instance_id=instance_id
        )
        try:
            outcome = self._run_steps(session)
        except SyncError as exc:
            self._events.log_session_failed(exc, duration_s=session.elapsed())
            raise

        report = SyncReport(
            customer_id=customer_id,
            instance_id=instance_id,
            workspace=session.workspace,
            outcome=outcome,
            duration_s=session.elapsed(),
        )
        self._events.log_session_completed(report)
        return report

    def _run_steps(self, session: SyncSession) -> SyncOutcome:
        workspace = session.workspace
        self._step(session, SyncStep.STAGE, self._tool.stage, workspace)
        self._step(session, SyncStep.SYNC, self._tool.synchronize, workspace)
        self._step(session, SyncStep.RESOLVE, self._tool.resolve_own, workspace)
        if not self._step(
            session, SyncStep.STATUS, self._tool.has_local_changes, workspace
        ):
            return SyncOutcome.NO_CHANGES
        message = submit_message(session.customer_id, session.instance_id)
        self._step(session, SyncStep.SUBMIT, self._tool.commit, workspace, message)
        return SyncOutcome.SUBMITTED

    @staticmethod
    def _step(
        session: SyncSession,
        step: SyncStep,
        action: typ.Callable[..., T],
        *args: object,
    ) -> T:
        try:
            return action(*args)
        except SyncToolError as exc:
            raise session.fail(step, exc) from exc


__all__ = [
    "RepositorySyncAgent",
    "SyncOutcome",
    "SyncReport",
    "SyncSession",
    "SyncStep",
    "submit_message",
]
