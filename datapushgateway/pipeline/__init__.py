"""Request pipeline tying classification, rendering and sync together."""

from datapushgateway.pipeline.locks import AsyncKeyedLock, KeyedLock
from datapushgateway.pipeline.service import (
    PipelineDependencies,
    PipelineResult,
    PushPipeline,
    count_unmatched,
)

__all__ = [
    "AsyncKeyedLock",
    "KeyedLock",
    "PipelineDependencies",
    "PipelineResult",
    "PushPipeline",
    "count_unmatched",
]
