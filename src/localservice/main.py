"""CLI main entry point."""

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any

import click
import structlog

from .config import CLIConfig, load_config, load_env_file
from .errors import LocalServiceError
from .formatters import info_to_dict, print_service_info
from .runtime.gateway import RuntimeGateway
from .services import ServiceLifecycle, ServiceOptions, create_service, service_names
from .shared.logging import configure_logging

logger = structlog.get_logger(__name__)

COMMANDS = ("create", "info", "push", "remove", "start", "stop")
COMMAND_ALIASES = {
    "config": "info",
    "seed": "push",
    "status": "info",
}


class AliasedGroup(click.Group):
    """Group that resolves command aliases (config/status -> info, seed -> push)."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, COMMAND_ALIASES.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


def normalize_argument_order(args: list[str]) -> tuple[list[str], bool]:
    """Rewrite the deprecated ``<service> <command>`` order.

    Returns:
        Tuple of (arguments, whether they were reordered).
    """
    positions = [i for i, arg in enumerate(args) if not arg.startswith("-")]
    if len(positions) < 2:
        return args, False

    first, second = positions[0], positions[1]
    known = set(COMMANDS) | set(COMMAND_ALIASES)
    if args[first] in known or args[second] not in known:
        return args, False

    fixed = list(args)
    fixed[first], fixed[second] = args[second], args[first]
    return fixed, True


@click.group(cls=AliasedGroup)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Show verbose info (e.g. raw docker commands)",
)
@click.option(
    "--strict-status",
    is_flag=True,
    help="Fail instead of assuming 'absent' when container status cannot be read",
)
@click.option("--json", "json_output", is_flag=True, help="Output info as JSON")
@click.version_option(package_name="localservice", prog_name="localservice")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, strict_status: bool, json_output: bool) -> None:
    """Manage local development service containers.

    Services: mysql, postgres (alias pgsql), minio.

    Settings are read from environment variables and from a .env file in the
    current directory.
    """
    ctx.ensure_object(dict)
    load_env_file(Path.cwd())
    try:
        config = load_config(verbose=verbose, strict_status=strict_status)
    except LocalServiceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    configure_logging(
        config.effective_log_level,
        log_file=config.log_file,
        json_output=config.log_format == "json",
    )
    ctx.obj["config"] = config
    ctx.obj["json_output"] = json_output


def _echo_err(message: str) -> None:
    click.echo(message, err=True)


def _build_service(ctx: click.Context, service: str) -> ServiceLifecycle:
    config: CLIConfig = ctx.obj["config"]
    gateway = RuntimeGateway(verbose=config.verbose, echo=_echo_err)
    options = ServiceOptions(
        cwd=Path.cwd(),
        verbose=config.verbose,
        strict_status=config.strict_status,
        on_progress=click.echo,
    )
    return create_service(service, os.environ, gateway, options)


def _fail(ctx: click.Context, error: LocalServiceError, operation: str, service: str) -> None:
    config: CLIConfig = ctx.obj["config"]
    if config.verbose:
        logger.error("operation_failed", operation=operation, service=service, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _run_operation(ctx: click.Context, service: str, operation: str) -> Any:
    try:
        instance = _build_service(ctx, service)
        return asyncio.run(getattr(instance, operation)())
    except LocalServiceError as e:
        _fail(ctx, e, operation, service)


@cli.command()
@click.argument("service")
@click.pass_context
def info(ctx: click.Context, service: str) -> None:
    """Show service configuration and container status."""
    try:
        instance = _build_service(ctx, service)
    except LocalServiceError as e:
        _fail(ctx, e, "info", service)
        return

    result = asyncio.run(instance.info())
    if ctx.obj["json_output"]:
        click.echo(json.dumps(info_to_dict(result), indent=2))
    else:
        print_service_info(result)


@cli.command()
@click.argument("service")
@click.pass_context
def create(ctx: click.Context, service: str) -> None:
    """Create a new service container."""
    _run_operation(ctx, service, "create")


@cli.command()
@click.argument("service")
@click.pass_context
def start(ctx: click.Context, service: str) -> None:
    """Start the existing service container."""
    _run_operation(ctx, service, "start")


@cli.command()
@click.argument("service")
@click.pass_context
def stop(ctx: click.Context, service: str) -> None:
    """Stop the running service container."""
    _run_operation(ctx, service, "stop")


@cli.command()
@click.argument("service")
@click.pass_context
def push(ctx: click.Context, service: str) -> None:
    """Push seed data to the running service container."""
    _run_operation(ctx, service, "push")


@cli.command()
@click.argument("service")
@click.pass_context
def remove(ctx: click.Context, service: str) -> None:
    """Remove the service container and its volume."""
    _run_operation(ctx, service, "remove")


@cli.command("services")
def list_services() -> None:
    """List supported services."""
    for name in service_names():
        click.echo(name)


def main(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    args, reordered = normalize_argument_order(args)
    if reordered:
        click.echo(
            "Warning: 'localservice <service> <command>' is deprecated, "
            f"use 'localservice {args_summary(args)}'",
            err=True,
        )
    cli.main(args=args, prog_name="localservice")


def args_summary(args: list[str]) -> str:
    """Join the positional arguments for display."""
    return " ".join(arg for arg in args if not arg.startswith("-"))
