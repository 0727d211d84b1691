"""Service lifecycle controller shared by every service.

Each lifecycle operation validates configuration, reconstructs the container
state from the runtime, checks the transition is legal, and only then mutates
anything. Subclasses supply the service-specific commands and setup steps.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

import structlog

from ..errors import (
    ConfigurationError,
    LocalServiceError,
    RuntimeInvocationError,
    SeedResolutionError,
    StateConflictError,
)
from ..runtime import commands
from ..runtime.gateway import RuntimeGateway
from ..runtime.inventory import ContainerHandle, ContainerInventory, LifecycleState
from ..runtime.readiness import DEFAULT_INTERVAL_MS, DEFAULT_MAX_RETRIES, ReadinessPoller
from ..runtime.seeds import resolve_seed_files
from .settings import ConfigKey, ServiceConfig, validate

logger = structlog.get_logger(__name__)


def wait_settings(prefix: str, display_name: str) -> tuple[ConfigKey, ConfigKey]:
    """Catalog entries controlling readiness polling for a service."""
    return (
        ConfigKey(
            key=f"{prefix}_SERVICE_WAIT_INTERVAL",
            description=(
                f"Number of milliseconds to wait between {display_name} service "
                "uptime test retries"
            ),
            default=DEFAULT_INTERVAL_MS,
        ),
        ConfigKey(
            key=f"{prefix}_SERVICE_WAIT_MAX_RETRIES",
            description=(
                f"Maximum number of times to retry {display_name} service uptime "
                "test before timing out"
            ),
            default=DEFAULT_MAX_RETRIES,
        ),
    )


def read_seed_file(path: Path) -> bytes:
    """Read one resolved seed file.

    Raises:
        SeedResolutionError: If the file vanished or is unreadable.
    """
    try:
        return path.read_bytes()
    except OSError as e:
        raise SeedResolutionError(
            message=f"Cannot read seed file {path}: {e.strerror or e}",
            patterns=[str(path)],
        ) from e


@dataclass
class ServiceOptions:
    """Per-invocation options for a service."""

    cwd: Path = field(default_factory=Path.cwd)
    verbose: bool = False
    strict_status: bool = False
    on_progress: Callable[[str], None] | None = None


@dataclass
class ServiceInfo:
    """Read-only snapshot rendered by the info command."""

    service: str
    config: ServiceConfig
    validation_error: str | None = None
    container: ContainerHandle | None = None
    status_error: str | None = None


class ServiceLifecycle:
    """Lifecycle state machine for one containerized service.

    States are ABSENT, STOPPED and RUNNING, reconstructed from the runtime
    before every operation.
    """

    name: ClassVar[str] = "service"
    display_name: ClassVar[str] = "Service"
    prefix: ClassVar[str] = "SERVICE"
    catalog: ClassVar[tuple[ConfigKey, ...]] = ()

    # Whether create blocks on the readiness poller before setup
    readiness_gated: ClassVar[bool] = True
    # Catalog key holding comma-separated seed file globs
    seed_key: ClassVar[str | None] = None

    def __init__(
        self,
        config: ServiceConfig,
        gateway: RuntimeGateway,
        options: ServiceOptions | None = None,
    ):
        """Initialize service.

        Args:
            config: Resolved configuration for this service.
            gateway: Gateway used for every runtime command.
            options: Invocation options (cwd, verbosity, strictness).
        """
        self.config = config
        self.gateway = gateway
        self.options = options or ServiceOptions()
        self.inventory = ContainerInventory(gateway, strict=self.options.strict_status)

    # ------------------------------------------------------------------
    # Service-specific hooks
    # ------------------------------------------------------------------

    def run_command(self) -> list[str]:
        """Argument vector allocating the container and its volume."""
        raise NotImplementedError

    def run_env(self) -> dict[str, str]:
        """Secrets forwarded to ``docker run`` through the environment."""
        return {}

    def exec_env(self) -> dict[str, str]:
        """Secrets forwarded to ``docker exec`` through the environment."""
        return {}

    async def is_service_ready(self) -> bool:
        """Probe the service inside the container."""
        raise NotImplementedError

    async def setup(self) -> None:
        """One-time setup run by create after the service is ready."""

    def seed_command(self) -> list[str]:
        """Client command executing one seed file read from stdin."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def container_name_key(self) -> str:
        return f"{self.prefix}_CONTAINER_NAME"

    @property
    def container_name(self) -> str:
        name = self.config.get(self.container_name_key)
        if not name:
            raise ConfigurationError.missing([self.container_name_key])
        return name

    def report(self, message: str) -> None:
        """Send a progress message to the caller."""
        if self.options.on_progress:
            self.options.on_progress(message)

    async def exec(self, command: Sequence[str], input: bytes | None = None) -> str:
        """Run a client command inside the service container."""
        env = self.exec_env()
        return await self.gateway.run(
            commands.exec_in_container(self.container_name, command, env_names=env.keys()),
            env=env,
            input=input,
        )

    async def _current(self) -> ContainerHandle:
        validate(self.config)
        return await self.inventory.inspect(self.container_name)

    async def _require(self, *allowed: LifecycleState) -> ContainerHandle:
        handle = await self._current()
        if handle.state in allowed:
            return handle
        if handle.state is LifecycleState.ABSENT:
            message = f"{self.display_name} container does not exist"
        elif handle.state is LifecycleState.RUNNING:
            message = f"{self.display_name} container is already running"
        else:
            message = f"{self.display_name} container is not running"
        raise StateConflictError(
            message=message,
            data={"container": handle.name, "state": handle.state.value},
        )

    async def _run_expecting_name(
        self,
        args: list[str],
        expected: str,
        failure: str,
    ) -> None:
        try:
            output = await self.gateway.run(args)
        except RuntimeInvocationError as e:
            raise RuntimeInvocationError(
                message=f"{failure}: {e.message}",
                command=e.command,
                returncode=e.returncode,
            ) from e
        if output != expected:
            raise RuntimeInvocationError(
                message=failure,
                command=args,
                data={"expected": expected, "output": output},
            )

    def readiness_poller(self) -> ReadinessPoller:
        interval_key, retries_key = (
            f"{self.prefix}_SERVICE_WAIT_INTERVAL",
            f"{self.prefix}_SERVICE_WAIT_MAX_RETRIES",
        )
        interval = self.config.get_int(interval_key)
        retries = self.config.get_int(retries_key)
        try:
            return ReadinessPoller(
                interval_ms=interval,
                max_retries=retries,
                service_name=self.display_name,
                settings_hint=f"{self.prefix}_SERVICE_WAIT_*",
            )
        except ValueError as e:
            raise ConfigurationError(
                message=f"Invalid readiness settings ({interval_key}, {retries_key}): {e}",
            ) from e

    async def wait_until_ready(self, poller: ReadinessPoller | None = None) -> int:
        """Block until the service accepts connections."""
        poller = poller or self.readiness_poller()

        def on_attempt(attempt: int, max_retries: int, error: str | None) -> None:
            if self.options.verbose:
                self.report(
                    f"Waiting for {self.display_name} service ({attempt}/{max_retries})"
                )

        return await poller.wait_until_ready(self.is_service_ready, on_attempt=on_attempt)

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    async def create(self) -> str:
        """Create the container, wait for readiness and run one-time setup.

        A failing setup step leaves the container running; the caller must
        remove and create again.

        Returns:
            New container id.
        """
        handle = await self._current()
        if handle.state is not LifecycleState.ABSENT:
            raise StateConflictError(
                message=f"{self.display_name} container already exists",
                data={"container": handle.name, "state": handle.state.value},
            )

        # Wait settings are checked before anything is allocated
        poller = self.readiness_poller() if self.readiness_gated else None
        container_id = await self.gateway.run(self.run_command(), env=self.run_env())
        logger.info("container_created", container=handle.name, id=container_id)

        try:
            if poller:
                await self.wait_until_ready(poller)
            await self.setup()
            if self.seed_key and self.config.get(self.seed_key):
                await self.seed()
        except LocalServiceError as e:
            logger.warning("setup_incomplete", container=handle.name, error=e.message)
            e.message = (
                f"{e.message}\n{self.display_name} container was created but setup did not "
                "complete; remove it and create it again"
            )
            raise

        self.report(f"Created {self.display_name} container")
        return container_id

    async def start(self) -> bool:
        handle = await self._require(LifecycleState.STOPPED)
        await self._run_expecting_name(
            commands.start_container(handle.name),
            handle.name,
            f"Failed to start {self.display_name} container",
        )
        logger.info("container_started", container=handle.name)
        self.report(f"Started {self.display_name} container")
        return True

    async def stop(self) -> bool:
        handle = await self._require(LifecycleState.RUNNING)
        await self._run_expecting_name(
            commands.stop_container(handle.name),
            handle.name,
            f"Failed to stop {self.display_name} container",
        )
        logger.info("container_stopped", container=handle.name)
        self.report(f"Stopped {self.display_name} container")
        return True

    async def remove(self) -> bool:
        """Stop (if running) and remove the container and its named volume."""
        handle = await self._require(LifecycleState.STOPPED, LifecycleState.RUNNING)
        if handle.state is LifecycleState.RUNNING:
            await self.stop()

        await self._run_expecting_name(
            commands.remove_container(handle.name),
            handle.name,
            f"Failed to remove {self.display_name} container",
        )
        logger.info("container_removed", container=handle.name)
        self.report(f"Removed {self.display_name} container")

        await self._run_expecting_name(
            commands.remove_volume(handle.name),
            handle.name,
            f"Failed to remove {self.display_name} volume",
        )
        logger.info("volume_removed", volume=handle.name)
        self.report(f"Removed {self.display_name} volume")
        return True

    async def push(self) -> bool:
        """Execute the configured seed files against the running service."""
        await self._require(LifecycleState.RUNNING)
        if self.readiness_gated:
            await self.wait_until_ready()
        await self.seed()
        return True

    async def seed(self) -> list[Path]:
        """Resolve seed globs and execute every file concurrently."""
        if not self.seed_key:
            raise ConfigurationError(message=f"{self.display_name} has no seed file setting")
        patterns = self.config.get(self.seed_key)
        if not patterns:
            raise ConfigurationError(
                message=f"{self.seed_key} is not set, no seed files to push",
                missing_keys=[self.seed_key],
            )

        paths = resolve_seed_files(patterns, self.options.cwd)
        contents = [read_seed_file(path) for path in paths]
        await asyncio.gather(
            *(self._execute_seed_file(path, data) for path, data in zip(paths, contents))
        )
        logger.info("seed_complete", container=self.container_name, files=len(paths))
        self.report(f"Seeded {self.display_name} database")
        return paths

    async def _execute_seed_file(self, path: Path, data: bytes) -> None:
        self.report(f"  Execute SQL: {path}")
        await self.exec(self.seed_command(), input=data)

    async def info(self) -> ServiceInfo:
        """Collect configuration and container status without raising."""
        info = ServiceInfo(service=self.display_name, config=self.config)
        try:
            validate(self.config)
        except ConfigurationError as e:
            info.validation_error = e.message
            return info

        try:
            info.container = await self.inventory.inspect(self.container_name)
        except RuntimeInvocationError as e:
            info.status_error = e.message
        return info
