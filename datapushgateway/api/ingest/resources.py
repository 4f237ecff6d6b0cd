"""Ingestion resources: JSON record batches and raw server uploads.

``POST /json?customer=<id>&instance=<id>`` accepts a JSON array of
monitoring records, renders the customer's report documents and syncs the
workspace. ``POST /data?customer=<id>&instance=<id>`` stores the body as
the instance's server document and syncs.

Both routes require basic authentication and answer 502 when the sync
session fails.

Usage
-----
Register the resources on the Falcon app::

    app.add_route("/json", JsonIngestResource(pipeline))
    app.add_route("/data", DataUploadResource(pipeline))

"""

from __future__ import annotations

import re
import typing as typ

import falcon

from datapushgateway.api.errors import InvalidInputError
from datapushgateway.records.batch import (
    BatchDecodeError,
    decode_batch,
    parse_records,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from datapushgateway.pipeline.service import PipelineResult, PushPipeline
    from datapushgateway.records.models import ParsedBatch

__all__ = [
    "IDENTIFIER_PATTERN",
    "DataUploadResource",
    "JsonIngestResource",
    "require_identifier",
    "serialize_result",
]

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def require_identifier(req: Request, name: str) -> str:
    """Return the query parameter ``name`` once it is a safe path segment.

    Raises
    ------
    InvalidInputError
        If the parameter is missing or contains characters outside
        ``[A-Za-z0-9_-]``.

    """
    value = req.get_param(name)
    if not value:
        raise InvalidInputError("query parameter is required", field=name)
    if IDENTIFIER_PATTERN.fullmatch(value) is None:
        raise InvalidInputError(
            "must contain only letters, digits, '_' or '-'", field=name
        )
    return value


def _serialize_sync(result: PipelineResult) -> dict[str, typ.Any]:
    if result.sync_error is not None:
        return {
            "outcome": "failed",
            "step": str(result.sync_error.step),
            "error": result.sync_error.reason,
        }
    if result.sync is None:
        return {"outcome": "skipped"}
    return {
        "outcome": str(result.sync.outcome),
        "duration_seconds": round(result.sync.duration_s, 3),
    }


def serialize_result(
    result: PipelineResult,
    batch: ParsedBatch | None = None,
) -> dict[str, typ.Any]:
    """Serialize a pipeline result to a JSON-compatible dict."""
    media: dict[str, typ.Any] = {
        "customer": result.customer_id,
        "instance": result.instance_id,
        "sync": _serialize_sync(result),
    }
    if batch is not None:
        render = result.render
        media["records"] = {
            "received": batch.received,
            "skipped": batch.skipped,
            "dropped": result.records_dropped,
        }
        media["documents"] = {
            "written": [str(path) for path in render.written],
            "removed": [str(path) for path in render.removed],
            "skipped": list(render.skipped),
            "failed": [
                {"document": failure.document, "reason": failure.reason}
                for failure in render.failures
            ],
        }
    if result.stored is not None:
        media["stored"] = str(result.stored)
    return media


def _respond(
    resp: Response,
    result: PipelineResult,
    batch: ParsedBatch | None = None,
) -> None:
    media = serialize_result(result, batch)
    if result.sync_error is not None:
        resp.status = falcon.HTTP_502
        media = {
            "title": "Sync failed",
            "description": str(result.sync_error),
            "step": str(result.sync_error.step),
            **media,
        }
    else:
        resp.status = falcon.HTTP_200
    resp.media = media


class JsonIngestResource:
    """Resource accepting JSON batches of monitoring records."""

    requires_auth = True

    def __init__(self, pipeline: PushPipeline) -> None:
        """Configure the resource with the ingestion pipeline."""
        self._pipeline = pipeline

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /json.

        Parameters
        ----------
        req
            Falcon request carrying ``customer`` and ``instance`` query
            parameters and a JSON array body.
        resp
            Falcon response populated with the pipeline outcome.

        """
        customer_id = require_identifier(req, "customer")
        instance_id = require_identifier(req, "instance")

        body = await req.stream.read()
        try:
            objects = decode_batch(body)
        except BatchDecodeError as exc:
            raise InvalidInputError(str(exc), field="body") from exc
        batch = parse_records(objects)

        result = await self._pipeline.run_async(
            batch.records,
            customer_id=customer_id,
            instance_id=instance_id,
        )
        _respond(resp, result, batch)


class DataUploadResource:
    """Resource storing a raw body as an instance's server document."""

    requires_auth = True

    def __init__(self, pipeline: PushPipeline) -> None:
        """Configure the resource with the ingestion pipeline."""
        self._pipeline = pipeline

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /data."""
        customer_id = require_identifier(req, "customer")
        instance_id = require_identifier(req, "instance")

        body = await req.stream.read()
        result = await self._pipeline.store_blob_async(
            body,
            customer_id=customer_id,
            instance_id=instance_id,
        )
        _respond(resp, result)
