"""Errors raised by version-control tools and sync sessions."""

from __future__ import annotations

import enum

from datapushgateway.errors import GatewayError


class SyncStep(enum.StrEnum):
    """Steps of a sync session, in execution order."""

    STAGE = "stage"
    SYNC = "sync"
    RESOLVE = "resolve"
    STATUS = "status"
    SUBMIT = "submit"


class SyncToolError(GatewayError):
    """Raised when one invocation of the version-control tool fails.

    Attributes
    ----------
    command
        Tool sub-command that failed (``rec``, ``sync``...).
    returncode
        Exit status, or ``None`` when the process never completed.
    output
        Combined stdout and stderr of the invocation.
    timed_out
        Whether the invocation was killed after exceeding its timeout.

    """

    def __init__(
        self,
        command: str,
        reason: str,
        *,
        returncode: int | None = None,
        output: str = "",
        timed_out: bool = False,
    ) -> None:
        """Initialise with the failing sub-command and a reason."""
        self.command = command
        self.returncode = returncode
        self.output = output
        self.timed_out = timed_out
        super().__init__(f"'{command}' {reason}")

    @classmethod
    def exited(cls, command: str, returncode: int, output: str) -> SyncToolError:
        """Return an error for a non-zero exit status."""
        return cls(
            command,
            f"exited with status {returncode}",
            returncode=returncode,
            output=output,
        )

    @classmethod
    def timeout(cls, command: str, seconds: float, output: str = "") -> SyncToolError:
        """Return an error for an invocation that exceeded its timeout."""
        return cls(
            command,
            f"timed out after {seconds:g} seconds",
            output=output,
            timed_out=True,
        )

    @classmethod
    def not_started(cls, command: str, exc: OSError) -> SyncToolError:
        """Return an error for a binary that could not be executed."""
        return cls(command, f"could not be started: {exc}")


class SyncError(GatewayError):
    """Raised when a sync session aborts at one of its steps.

    Attributes
    ----------
    step
        The step that failed; later steps were not run.
    customer_id
        Customer whose workspace was being synchronised.
    instance_id
        Instance that triggered the session.

    """

    def __init__(
        self,
        step: SyncStep,
        *,
        customer_id: str,
        instance_id: str,
        reason: str,
    ) -> None:
        """Initialise with the failed step, session identity and reason."""
        self.step = step
        self.customer_id = customer_id
        self.instance_id = instance_id
        self.reason = reason
        super().__init__(f"{step}-failed for {customer_id}/{instance_id}: {reason}")

    @property
    def code(self) -> str:
        """Stable identifier such as ``stage-failed``."""
        return f"{self.step}-failed"
