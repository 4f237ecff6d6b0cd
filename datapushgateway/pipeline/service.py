"""Ingest pipeline: classify, render and synchronise under a customer lock.

``PushPipeline.run`` and ``PushPipeline.store_blob`` are synchronous. They
perform blocking filesystem and subprocess work. The HTTP layer calls the
``*_async`` variants, which wait for the customer on the event loop and
only then hand the work to a worker thread.
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import typing as typ

from datapushgateway.logging import get_logger, log_info
from datapushgateway.pipeline.locks import AsyncKeyedLock, KeyedLock
from datapushgateway.records.classifier import classify
from datapushgateway.reporting.renderer import RenderResult, ReportRenderer
from datapushgateway.sync.errors import SyncError
from datapushgateway.taxonomy.loader import load_taxonomy

if typ.TYPE_CHECKING:
    from pathlib import Path

    from datapushgateway.records.models import Record
    from datapushgateway.reporting.filesystem_sink import FilesystemDocumentSink
    from datapushgateway.sync.agent import RepositorySyncAgent, SyncReport
    from datapushgateway.taxonomy.models import Taxonomy

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class PipelineDependencies:
    """Collaborators the pipeline drives.

    Attributes
    ----------
    taxonomy_path
        Taxonomy YAML, reloaded on every run so edits apply without restart.
    sink
        Filesystem sink rooted at the data directory.
    agent
        Sync agent reconciling customer workspaces with the depot.

    """

    taxonomy_path: Path
    sink: FilesystemDocumentSink
    agent: RepositorySyncAgent


@dc.dataclass(frozen=True, slots=True)
class PipelineResult:
    """Outcome of one pipeline run.

    Exactly one of ``sync`` and ``sync_error`` is set.
    """

    customer_id: str
    instance_id: str
    render: RenderResult = dc.field(default_factory=RenderResult)
    records_dropped: int = 0
    stored: Path | None = None
    sync: SyncReport | None = None
    sync_error: SyncError | None = None

    @property
    def ok(self) -> bool:
        """Whether the sync session completed."""
        return self.sync_error is None


def count_unmatched(records: typ.Iterable[Record], taxonomy: Taxonomy) -> int:
    """Return how many records carry a tag absent from ``taxonomy``."""
    return sum(1 for record in records if taxonomy.resolve_tag(record.tag) is None)


class PushPipeline:
    """Run ingestion requests against per-customer workspaces.

    Parameters
    ----------
    dependencies
        Taxonomy location, document sink and sync agent.
    locks
        Shared lock arena; one is created when omitted.

    """

    def __init__(
        self,
        dependencies: PipelineDependencies,
        *,
        locks: KeyedLock | None = None,
    ) -> None:
        """Initialise the pipeline with its collaborators."""
        self._deps = dependencies
        self._locks = KeyedLock() if locks is None else locks
        self._waiters = AsyncKeyedLock()

    @property
    def locks(self) -> KeyedLock:
        """Lock arena serialising work per customer."""
        return self._locks

    @property
    def waiters(self) -> AsyncKeyedLock:
        """Event-loop arena queuing async callers per customer."""
        return self._waiters

    def run(
        self,
        records: typ.Sequence[Record],
        *,
        customer_id: str,
        instance_id: str,
    ) -> PipelineResult:
        """Classify and render ``records``, then sync the customer workspace.

        Raises
        ------
        ConfigError
            If the taxonomy cannot be loaded, or two of its documents share
            a name once the instance is substituted. Nothing is written or
            synced.

        """
        with self._locks.hold(customer_id):
            taxonomy = load_taxonomy(self._deps.taxonomy_path).resolve_placeholders(
                instance_id
            )
            dropped = count_unmatched(records, taxonomy)
            group = classify(records, taxonomy)
            render = ReportRenderer(self._deps.sink).render(
                group, taxonomy, customer_id=customer_id
            )
            result = PipelineResult(
                customer_id=customer_id,
                instance_id=instance_id,
                render=render,
                records_dropped=dropped,
            )
            return self._sync(result)

    def store_blob(
        self,
        body: bytes,
        *,
        customer_id: str,
        instance_id: str,
    ) -> PipelineResult:
        """Store a raw upload as the instance's server document, then sync.

        Raises
        ------
        DocumentWriteError
            If the upload cannot be written; no sync is attempted.

        """
        with self._locks.hold(customer_id):
            path = self._deps.sink.write_server_blob(customer_id, instance_id, body)
            log_info(logger, "Stored %d byte upload at %s", len(body), path)
            result = PipelineResult(
                customer_id=customer_id,
                instance_id=instance_id,
                stored=path,
            )
            return self._sync(result)

    async def run_async(
        self,
        records: typ.Sequence[Record],
        *,
        customer_id: str,
        instance_id: str,
    ) -> PipelineResult:
        """Await the customer on the event loop, then :meth:`run` on a thread."""
        async with self._waiters.hold(customer_id):
            return await asyncio.to_thread(
                self.run,
                records,
                customer_id=customer_id,
                instance_id=instance_id,
            )

    async def store_blob_async(
        self,
        body: bytes,
        *,
        customer_id: str,
        instance_id: str,
    ) -> PipelineResult:
        """Await the customer on the event loop, then :meth:`store_blob`."""
        async with self._waiters.hold(customer_id):
            return await asyncio.to_thread(
                self.store_blob,
                body,
                customer_id=customer_id,
                instance_id=instance_id,
            )

    def _sync(self, result: PipelineResult) -> PipelineResult:
        try:
            report = self._deps.agent.sync(
                result.customer_id,
                result.instance_id,
                self._deps.sink.base_path,
            )
        except SyncError as exc:
            return dc.replace(result, sync_error=exc)
        return dc.replace(result, sync=report)


__all__ = [
    "PipelineDependencies",
    "PipelineResult",
    "PushPipeline",
    "count_unmatched",
]
