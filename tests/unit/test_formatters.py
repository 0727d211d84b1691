"""Unit tests for info output formatting."""

from io import StringIO

from rich.console import Console

from localservice.formatters import (
    container_status,
    display_value,
    info_to_dict,
    print_service_info,
)
from localservice.runtime import ContainerHandle
from localservice.services import MySQLService, ServiceInfo, load_service_config


def make_info(environ, **kwargs) -> ServiceInfo:
    config = load_service_config(MySQLService.catalog, environ)
    return ServiceInfo(service="MySQL", config=config, **kwargs)


def render(info: ServiceInfo) -> str:
    output = StringIO()
    print_service_info(info, console=Console(file=output, width=200, color_system=None))
    return output.getvalue()


class TestDisplayValue:
    """Tests for display_value."""

    def test_masks_secrets(self):
        assert display_value("MYSQL_ROOT_PASSWORD", "s3cret") == "********"

    def test_plain_values(self):
        assert display_value("MYSQL_DATABASE", "app") == "app"
        assert display_value("MYSQL_SERVICE_WAIT_INTERVAL", 1000) == "1000"

    def test_empty(self):
        assert display_value("MYSQL_ROOT_PASSWORD", None) == ""


class TestContainerStatus:
    """Tests for container_status."""

    def test_status_values(self, mysql_env):
        assert container_status(make_info(mysql_env)) == "N/A"
        absent = ContainerHandle(name="app-mysql")
        assert container_status(make_info(mysql_env, container=absent)) == "N/A"
        stopped = ContainerHandle(name="app-mysql", id="abc")
        assert container_status(make_info(mysql_env, container=stopped)) == "Stopped"
        running = ContainerHandle(name="app-mysql", id="abc", running=True)
        assert container_status(make_info(mysql_env, container=running)) == "Running"


class TestInfoToDict:
    """Tests for info_to_dict."""

    def test_valid(self, mysql_env):
        info = make_info(mysql_env, container=ContainerHandle(name="app-mysql", id="abc"))

        data = info_to_dict(info)

        assert data["error"] is None
        assert data["container"] == {
            "name": "app-mysql",
            "id": "abc",
            "status": "Stopped",
            "error": None,
        }
        password = next(e for e in data["config"] if e["key"] == "MYSQL_ROOT_PASSWORD")
        assert password["value"] == "********"
        port = next(e for e in data["config"] if e["key"] == "MYSQL_EXPOSED_PORT")
        assert port["source"] == "default"

    def test_invalid_omits_container(self):
        data = info_to_dict(make_info({}, validation_error="Missing required environment variables: X"))

        assert data["error"].startswith("Missing required")
        assert "container" not in data


class TestPrintServiceInfo:
    """Tests for print_service_info."""

    def test_valid_config(self, mysql_env):
        info = make_info(
            mysql_env,
            container=ContainerHandle(name="app-mysql", id="abc", running=True),
        )

        output = render(info)

        assert "MySQL Environment Variables" in output
        assert "MYSQL_CONTAINER_NAME" in output
        assert "s3cret" not in output
        assert "Container Status" in output
        assert "Running" in output

    def test_invalid_config_skips_status(self):
        info = make_info({}, validation_error="Missing required environment variables: MYSQL_IMAGE")

        output = render(info)

        assert "Missing required environment variables" in output
        assert "Container status commands will not run" in output
        assert "Container ID" not in output
