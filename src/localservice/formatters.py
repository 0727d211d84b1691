"""CLI output formatting for the info command."""

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .services.base import ServiceInfo

SECRET_MARKERS = ("PASSWORD", "SECRET", "TOKEN")
MASK = "********"


def display_value(key: str, value: Any) -> str:
    """Render a config value, masking secrets."""
    if value is None or str(value) == "":
        return ""
    if any(marker in key for marker in SECRET_MARKERS):
        return MASK
    return str(value)


def container_status(info: ServiceInfo) -> str:
    """Human-readable container status."""
    if info.container is None or not info.container.id:
        return "N/A"
    return "Running" if info.container.running else "Stopped"


def info_to_dict(info: ServiceInfo) -> dict[str, Any]:
    """Convert ServiceInfo to a JSON-serializable dict."""
    data: dict[str, Any] = {
        "service": info.service,
        "config": [
            {
                "key": entry.key,
                "required": entry.required,
                "default": entry.default,
                "value": display_value(entry.key, entry.value) or None,
                "source": entry.source,
                "description": entry.description,
            }
            for entry in info.config
        ],
        "error": info.validation_error,
    }
    if info.validation_error is None:
        data["container"] = {
            "name": info.container.name if info.container else None,
            "id": info.container.id if info.container else None,
            "status": container_status(info),
            "error": info.status_error,
        }
    return data


def print_service_info(info: ServiceInfo, console: Console | None = None) -> None:
    """Print configuration table and container status.

    The status section is skipped when configuration is invalid.
    """
    console = console or Console()

    table = Table(title=f"{info.service} Environment Variables", title_justify="left")
    table.add_column("Key", no_wrap=True)
    table.add_column("Required")
    table.add_column("Default")
    table.add_column("Value")
    for entry in info.config:
        table.add_row(
            entry.key,
            "Y" if entry.required else "N",
            display_value(entry.key, entry.default),
            display_value(entry.key, entry.value),
        )
    console.print(table)

    if info.validation_error:
        console.print(Panel(info.validation_error, title="ERROR", border_style="red"))
        console.print()
        console.print(
            Panel(
                "Container status commands will not run until env var errors are resolved",
                title=f"{info.service} Container Status",
                border_style="red",
            )
        )
        return

    console.print()
    status = Table(title=f"{info.service} Container Status", title_justify="left")
    status.add_column("Subject", no_wrap=True)
    status.add_column("Value")
    container = info.container
    status.add_row("Container Name", (container.name if container else None) or "Undefined")
    status.add_row("Container ID", (container.id if container else None) or "Unknown")
    status.add_row("Container Status", container_status(info))
    console.print(status)

    if info.status_error:
        console.print(Panel(info.status_error, title="ERROR", border_style="red"))
