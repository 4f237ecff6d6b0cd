"""Authenticated ingestion resources.

Usage
-----
Import the resources for route registration::

    from datapushgateway.api.ingest.resources import (
        DataUploadResource,
        JsonIngestResource,
    )
"""
