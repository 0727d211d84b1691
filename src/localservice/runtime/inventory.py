"""Container inventory probe.

Answers whether a named container exists and whether it is running. State is
never cached; each call queries the runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from ..errors import RuntimeInvocationError
from . import commands
from .gateway import RuntimeGateway

logger = structlog.get_logger(__name__)


class LifecycleState(Enum):
    """Container lifecycle state derived from the runtime."""

    ABSENT = "absent"  # No container with this name
    STOPPED = "stopped"  # Container exists, not running
    RUNNING = "running"  # Container exists and is running


@dataclass(frozen=True)
class ContainerHandle:
    """Snapshot of a named container."""

    name: str
    id: str | None = None
    running: bool = False

    @property
    def state(self) -> LifecycleState:
        if not self.id:
            return LifecycleState.ABSENT
        if self.running:
            return LifecycleState.RUNNING
        return LifecycleState.STOPPED


class ContainerInventory:
    """Query container existence and running state."""

    def __init__(self, gateway: RuntimeGateway, strict: bool = False):
        """Initialize inventory probe.

        Args:
            gateway: Gateway used to issue docker commands.
            strict: If True, runtime query failures propagate. Otherwise they
                are reported as "absent" / "not running".
        """
        self.gateway = gateway
        self.strict = strict

    async def exists(self, name: str) -> str | None:
        """Return the container id for ``name``, or None if absent."""
        try:
            output = await self.gateway.run(commands.list_by_name(name))
        except RuntimeInvocationError as e:
            if self.strict:
                raise
            logger.warning("container_lookup_failed", container=name, error=e.message)
            return None
        lines = [line.strip() for line in output.splitlines() if line.strip()]
        return lines[0] if lines else None

    async def is_running(self, name: str) -> bool:
        """Return True if a running container is named exactly ``name``."""
        try:
            output = await self.gateway.run(commands.list_running_names())
        except RuntimeInvocationError as e:
            if self.strict:
                raise
            logger.warning("running_lookup_failed", container=name, error=e.message)
            return False
        return name in [line.strip() for line in output.splitlines()]

    async def inspect(self, name: str) -> ContainerHandle:
        """Build a fresh ContainerHandle for ``name``."""
        container_id = await self.exists(name)
        if not container_id:
            return ContainerHandle(name=name)
        running = await self.is_running(name)
        return ContainerHandle(name=name, id=container_id, running=running)
