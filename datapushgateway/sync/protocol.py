"""SyncTool protocol: the version-control capability the agent drives.

The agent never shells out itself. It drives an object implementing this
protocol, so tests can substitute an in-memory fake and deployments can
swap the Perforce adapter for another tool.

Every method raises :class:`~datapushgateway.sync.errors.SyncToolError`
when the underlying operation fails or times out.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


@typ.runtime_checkable
class SyncTool(typ.Protocol):
    """Operations needed to reconcile a workspace with the shared depot."""

    def stage(self, workspace: Path) -> None:
        """Reconcile local additions, edits and deletions into a changelist."""
        ...

    def synchronize(self, workspace: Path) -> None:
        """Pull the latest shared state into the workspace."""
        ...

    def resolve_own(self, workspace: Path) -> None:
        """Resolve conflicts in favour of the locally staged files."""
        ...

    def has_local_changes(self, workspace: Path) -> bool:
        """Return whether files below ``workspace`` are still opened."""
        ...

    def commit(self, workspace: Path, message: str) -> None:
        """Submit the opened files below ``workspace`` with ``message``."""
        ...
