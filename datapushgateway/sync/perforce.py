"""Perforce adapter for the SyncTool protocol.

Each operation runs the configured ``p4`` binary once with a bounded
timeout. The child process gets a copy of the gateway's environment with
``P4CONFIG`` and any configured overrides layered on top, so concurrent
sessions never observe each other's settings.

Usage
-----
>>> from pathlib import Path
>>> tool = PerforceSyncTool(PerforceConfig(p4config=".p4config"), timeout_s=60)
>>> tool.stage(Path("data/acme"))
>>> if tool.has_local_changes(Path("data/acme")):
...     tool.commit(Path("data/acme"), "Customer: acme, Instance: web-01")

"""

from __future__ import annotations

import os
import subprocess
import typing as typ

from datapushgateway.logging import get_logger, log_debug, log_info
from datapushgateway.sync.errors import SyncToolError
from datapushgateway.sync.masking import mask_arguments, mask_environment

if typ.TYPE_CHECKING:
    from pathlib import Path

    from datapushgateway.sync.config import PerforceConfig

logger = get_logger(__name__)

DEFAULT_TIMEOUT_S = 120.0
DEPOT_PATH_MARKER = "//"
TICKET_VALID_MARKER = "ticket expires in"
TRUST_ESTABLISHED_MARKER = "Trust already established"


def _as_text(value: str | bytes | None) -> str:
    # TimeoutExpired carries bytes even when the call used text=True.
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _files_below(workspace: Path) -> str:
    return f"{workspace}/..."


class PerforceSyncTool:
    """Drive the ``p4`` command-line client.

    Parameters
    ----------
    config
        Binary location, ``P4CONFIG`` file name and environment overrides.
    timeout_s
        Upper bound in seconds for every single invocation.

    """

    def __init__(
        self,
        config: PerforceConfig,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        """Initialise the adapter with its configuration and timeout."""
        if timeout_s <= 0:
            msg = "timeout_s must be positive"
            raise ValueError(msg)
        self._config = config
        self._timeout_s = timeout_s

    @property
    def timeout_s(self) -> float:
        """Per-invocation timeout in seconds."""
        return self._timeout_s

    def _environment(self) -> dict[str, str]:
        return {**os.environ, **self._config.child_environment()}

    def _run(
        self,
        command: str,
        arguments: list[str],
        *,
        stdin: str | None = None,
    ) -> str:
        argv = [self._config.binary, *arguments]
        log_debug(
            logger,
            "Executing %s with %s",
            " ".join(mask_arguments(argv)),
            " ".join(mask_environment(self._config.child_environment())),
        )
        try:
            result = subprocess.run(  # noqa: S603
                argv,
                capture_output=True,
                text=True,
                input=stdin,
                env=self._environment(),
                timeout=self._timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            output = _as_text(exc.stdout) + _as_text(exc.stderr)
            raise SyncToolError.timeout(command, self._timeout_s, output) from exc
        except OSError as exc:
            raise SyncToolError.not_started(command, exc) from exc

        output = (result.stdout or "") + (result.stderr or "")
        log_debug(logger, "'%s' exited with status %d", command, result.returncode)
        if result.returncode != 0:
            raise SyncToolError.exited(command, result.returncode, output)
        return output

    # SyncTool protocol

    def stage(self, workspace: Path) -> None:
        """Run ``p4 -d <workspace> rec``."""
        self._run("rec", ["-d", str(workspace), "rec"])

    def synchronize(self, workspace: Path) -> None:
        """Run ``p4 -d <workspace> sync``."""
        self._run("sync", ["-d", str(workspace), "sync"])

    def resolve_own(self, workspace: Path) -> None:
        """Run ``p4 -d <workspace> resolve -ay`` to accept local files."""
        self._run("resolve", ["-d", str(workspace), "resolve", "-ay"])

    def has_local_changes(self, workspace: Path) -> bool:
        """Return whether ``p4 opened`` lists any depot file below the workspace."""
        output = self._run("opened", ["opened", _files_below(workspace)])
        return DEPOT_PATH_MARKER in output

    def commit(self, workspace: Path, message: str) -> None:
        """Run ``p4 submit -d <message> <workspace>/...``."""
        self._run("submit", ["submit", "-d", message, _files_below(workspace)])

    # Session helpers used by the ``login`` command

    def is_logged_in(self) -> bool:
        """Return whether ``p4 login -s`` reports an active session."""
        try:
            self._run("login", ["login", "-s"])
        except SyncToolError as exc:
            if exc.returncode is None:
                raise
            return False
        return True

    def has_valid_ticket(self) -> bool:
        """Return whether ``p4 tickets`` lists a ticket that has not expired."""
        return TICKET_VALID_MARKER in self._run("tickets", ["tickets"])

    def ensure_trust(self) -> bool:
        """Accept the server fingerprint unless trust is already established.

        Returns
        -------
        bool
            ``True`` when a new fingerprint was accepted.

        """
        try:
            output = self._run("trust", ["trust", "-l"])
        except SyncToolError as exc:
            if exc.returncode is None:
                raise
            output = exc.output
        if TRUST_ESTABLISHED_MARKER in output:
            return False
        self._run("trust", ["trust", "-y"])
        log_info(logger, "Accepted Perforce server fingerprint")
        return True

    def login(self, password: str) -> None:
        """Obtain a ticket valid on all hosts, passing the password on stdin."""
        self._run("login", ["login", "-a"], stdin=f"{password}\n")
        log_info(logger, "Perforce login succeeded")


__all__ = ["DEFAULT_TIMEOUT_S", "PerforceSyncTool"]
