"""Version-control synchronisation of customer report directories.

Public API
----------
SyncTool
    Protocol describing the version-control operations a session needs.
PerforceSyncTool
    ``SyncTool`` adapter shelling out to the ``p4`` client.
RepositorySyncAgent
    Runs stage, sync, resolve, status and submit for one workspace.
SyncReport / SyncOutcome
    Result of a session that completed.
SyncError / SyncToolError
    Session-level and invocation-level failures.
mask_arguments
    Redacts credential-bearing arguments before logging.

"""

from datapushgateway.sync.agent import (
    RepositorySyncAgent,
    SyncOutcome,
    SyncReport,
    SyncSession,
    submit_message,
)
from datapushgateway.sync.config import PerforceConfig, load_perforce_config
from datapushgateway.sync.errors import SyncError, SyncStep, SyncToolError
from datapushgateway.sync.masking import mask_arguments
from datapushgateway.sync.observability import SyncEventLogger, SyncEventType
from datapushgateway.sync.perforce import PerforceSyncTool
from datapushgateway.sync.protocol import SyncTool

__all__ = [
    "PerforceConfig",
    "PerforceSyncTool",
    "RepositorySyncAgent",
    "SyncError",
    "SyncEventLogger",
    "SyncEventType",
    "SyncOutcome",
    "SyncReport",
    "SyncSession",
    "SyncStep",
    "SyncTool",
    "SyncToolError",
    "load_perforce_config",
    "mask_arguments",
    "submit_message",
]
