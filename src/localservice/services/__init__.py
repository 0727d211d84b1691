"""Service package: lifecycle controller, per-service definitions, registry."""

from .base import ServiceInfo, ServiceLifecycle, ServiceOptions
from .minio import MinIOService
from .mysql import MySQLService
from .postgres import PostgresService
from .registry import SERVICES, create_service, get_service_class, service_names
from .settings import (
    ConfigKey,
    ConfigValue,
    ServiceConfig,
    load_service_config,
    validate,
)

__all__ = [
    # Lifecycle
    "ServiceLifecycle",
    "ServiceOptions",
    "ServiceInfo",
    # Services
    "MySQLService",
    "PostgresService",
    "MinIOService",
    # Registry
    "SERVICES",
    "create_service",
    "get_service_class",
    "service_names",
    # Settings
    "ConfigKey",
    "ConfigValue",
    "ServiceConfig",
    "load_service_config",
    "validate",
]
