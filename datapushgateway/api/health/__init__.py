"""Banner and health probe resources.

Usage
-----
Import the resources for route registration::

    from datapushgateway.api.health.resources import HealthResource, ReadyResource
"""
