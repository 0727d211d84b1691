"""Runtime package: docker gateway, inventory, readiness and seed resolution.

This package provides the pieces every service shares:
1. Builds docker argument vectors
2. Runs them through the gateway
3. Reconstructs container state from the runtime
4. Polls service readiness
5. Resolves seed file globs
"""

from . import commands
from .gateway import RuntimeGateway
from .inventory import ContainerHandle, ContainerInventory, LifecycleState
from .readiness import ReadinessPoller
from .seeds import resolve_seed_files, split_patterns

__all__ = [
    "commands",
    # Gateway
    "RuntimeGateway",
    # Inventory
    "ContainerHandle",
    "ContainerInventory",
    "LifecycleState",
    # Readiness
    "ReadinessPoller",
    # Seeds
    "resolve_seed_files",
    "split_patterns",
]
