"""Build application dependencies from gateway configuration.

Usage
-----
Build dependencies for the API layer::

    from datapushgateway.api.factory import build_app_dependencies
    from datapushgateway.config import GatewayConfig

    deps = build_app_dependencies(GatewayConfig.from_env())

"""

from __future__ import annotations

import typing as typ

from datapushgateway.api.app import AppDependencies
from datapushgateway.auth.credentials import load_credentials
from datapushgateway.pipeline.service import PipelineDependencies, PushPipeline
from datapushgateway.reporting.filesystem_sink import FilesystemDocumentSink
from datapushgateway.sync.agent import RepositorySyncAgent
from datapushgateway.sync.config import PerforceConfig, load_perforce_config
from datapushgateway.sync.observability import SyncEventLogger
from datapushgateway.sync.perforce import PerforceSyncTool

if typ.TYPE_CHECKING:
    from datapushgateway.config import GatewayConfig

__all__ = ["build_app_dependencies", "build_perforce_tool", "build_pipeline"]


def build_perforce_tool(config: GatewayConfig) -> PerforceSyncTool:
    """Build the Perforce adapter from the optional application config.

    Raises
    ------
    ConfigError
        If the application config is set but unusable.

    """
    perforce = (
        load_perforce_config(config.config_path)
        if config.config_path is not None
        else PerforceConfig()
    )
    return PerforceSyncTool(perforce, timeout_s=config.sync_timeout_s)


def build_pipeline(config: GatewayConfig) -> PushPipeline:
    """Assemble the sink, sync agent and pipeline for ``config``."""
    agent = RepositorySyncAgent(
        build_perforce_tool(config), event_logger=SyncEventLogger()
    )
    dependencies = PipelineDependencies(
        taxonomy_path=config.taxonomy_path,
        sink=FilesystemDocumentSink(config.data_dir),
        agent=agent,
    )
    return PushPipeline(dependencies)


def build_app_dependencies(config: GatewayConfig) -> AppDependencies:
    """Return full dependencies, or health-only ones without an auth file.

    Raises
    ------
    ConfigError
        If the auth file or application config cannot be loaded.

    """
    if config.auth_file is None:
        return AppDependencies()
    return AppDependencies(
        credentials=load_credentials(config.auth_file),
        pipeline=build_pipeline(config),
    )
