"""Unit tests for the service registry."""

import pytest

from localservice.errors import UnsupportedServiceError
from localservice.services import (
    MinIOService,
    MySQLService,
    PostgresService,
    create_service,
    get_service_class,
    service_names,
)


class TestRegistry:
    """Tests for registry lookups."""

    def test_service_names(self):
        assert service_names() == ["minio", "mysql", "pgsql", "postgres"]

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("mysql", MySQLService),
            ("postgres", PostgresService),
            ("pgsql", PostgresService),
            ("minio", MinIOService),
            ("MySQL", MySQLService),
        ],
    )
    def test_lookup(self, name, expected):
        assert get_service_class(name) is expected

    def test_unknown_service(self):
        with pytest.raises(UnsupportedServiceError) as exc_info:
            get_service_class("redis")

        assert str(exc_info.value) == '"redis" is not a supported service'
        assert exc_info.value.service == "redis"

    def test_create_service_loads_config(self, fake_docker, mysql_env):
        """Test create_service resolves configuration from the mapping."""
        service = create_service("mysql", mysql_env, fake_docker)

        assert isinstance(service, MySQLService)
        assert service.container_name == "app-mysql"
        assert service.config.get("MYSQL_EXPOSED_PORT") == "3306"
