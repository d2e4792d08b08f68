"""
BCE Cloud Python SDK - Endpoint Resolution

Maps a region and a service to the host a client connects to. All
resolution happens when a client is constructed, so a bad region or
service id fails fast with ConfigurationError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional

from bcecloud.config import Endpoints
from bcecloud.exceptions import ConfigurationError

_REGION_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")


@dataclass(frozen=True)
class EndpointTarget:
    """
    Resolved connection target.

    Attributes:
        host: Host (and optional port) to connect to
        base_path: Path prefix prepended to every request path
    """
    host: str
    base_path: str = ""

    def sub_resource_host(self, name: str) -> str:
        """Host header value for a bucket-style sub-resource."""
        return f"{name}.{self.host}"

    def full_path(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return self.base_path + path


def _check_region(region: str) -> None:
    if not region or not _REGION_PATTERN.match(region):
        raise ConfigurationError(f"Invalid region: {region!r}")


def resolve_region_endpoint(
    region: str,
    domain: str = Endpoints.BOS_DOMAIN,
) -> EndpointTarget:
    """
    Build a ``{region}.{domain}`` endpoint.

    Used by storage-style services, where the bucket goes into the
    ``host`` header while the connection targets the region host.
    """
    _check_region(region)
    return EndpointTarget(host=f"{region}.{domain}")


def resolve_service_endpoint(
    service_id: str,
    region: str,
    table: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> EndpointTarget:
    """
    Look up the host of a service in a region.

    Raises:
        ConfigurationError: If the service id or region is unknown
    """
    table = Endpoints.SERVICE_HOSTS if table is None else table
    regions: Optional[Mapping[str, str]] = table.get(service_id)
    if regions is None:
        raise ConfigurationError(f"Unknown service: {service_id!r}")
    host = regions.get(region)
    if host is None:
        supported = ", ".join(sorted(regions))
        raise ConfigurationError(
            f"Service {service_id!r} is not available in region {region!r} "
            f"(supported: {supported})"
        )
    return EndpointTarget(host=host)


def resolve_host_template(template: str, region: str) -> EndpointTarget:
    """
    Resolve a host template such as ``{region}.bcebos.com`` or
    ``localhost:8080/prefix``.

    Any scheme is stripped; a path after the host becomes the base path.
    """
    _check_region(region)
    try:
        rendered = template.format(region=region)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigurationError(f"Invalid host template {template!r}: {e}") from e

    if "://" in rendered:
        rendered = rendered.split("://", 1)[1]
    host, _, base_path = rendered.partition("/")
    if not host:
        raise ConfigurationError(f"Host template {template!r} has no host")
    base_path = "/" + base_path.strip("/") if base_path.strip("/") else ""
    return EndpointTarget(host=host, base_path=base_path)


def resolve_endpoint(
    region: str,
    service_id: Optional[str] = None,
    host_template: Optional[str] = None,
    domain: str = Endpoints.BOS_DOMAIN,
) -> EndpointTarget:
    """
    Resolve an endpoint by template, service table, or region suffix,
    in that order of precedence.
    """
    if host_template:
        return resolve_host_template(host_template, region)
    if service_id:
        return resolve_service_endpoint(service_id, region)
    return resolve_region_endpoint(region, domain)
