"""Static service registry."""

from __future__ import annotations

from collections.abc import Mapping

from ..errors import UnsupportedServiceError
from ..runtime.gateway import RuntimeGateway
from .base import ServiceLifecycle, ServiceOptions
from .minio import MinIOService
from .mysql import MySQLService
from .postgres import PostgresService
from .settings import load_service_config

SERVICES: dict[str, type[ServiceLifecycle]] = {
    "minio": MinIOService,
    "mysql": MySQLService,
    "pgsql": PostgresService,
    "postgres": PostgresService,
}


def service_names() -> list[str]:
    """Registered service identifiers, sorted."""
    return sorted(SERVICES)


def get_service_class(name: str) -> type[ServiceLifecycle]:
    """Look up a service class by identifier.

    Raises:
        UnsupportedServiceError: If the name is not registered.
    """
    try:
        return SERVICES[name.lower()]
    except KeyError:
        raise UnsupportedServiceError(
            message=f'"{name}" is not a supported service',
            service=name,
            data={"supported": service_names()},
        ) from None


def create_service(
    name: str,
    environ: Mapping[str, str],
    gateway: RuntimeGateway,
    options: ServiceOptions | None = None,
) -> ServiceLifecycle:
    """Build a service instance with configuration loaded from ``environ``."""
    service_class = get_service_class(name)
    config = load_service_config(service_class.catalog, environ)
    return service_class(config, gateway, options)
