"""Docker argument vector builders.

Each builder returns the arguments that follow the ``docker`` executable.
Values are passed as discrete arguments, never through a shell.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence


def list_by_name(name: str) -> list[str]:
    """List ids of all containers (running or not) named exactly ``name``."""
    # Docker matches the name filter as a regex against "/<name>" on older engines
    return ["ps", "-a", "-q", "--filter", f"name=^/?{re.escape(name)}$"]


def list_running_names() -> list[str]:
    """List names of all running containers, one per line."""
    return ["ps", "--format", "{{.Names}}"]


def run_container(
    name: str,
    image: str,
    ports: Mapping[int | str, int | str] | None = None,
    volumes: Mapping[str, str] | None = None,
    env_names: Iterable[str] = (),
    command: Sequence[str] = (),
) -> list[str]:
    """Create and start a detached container.

    Args:
        name: Container name
        image: Image reference
        ports: Mapping of host port to container port
        volumes: Mapping of volume name to container path
        env_names: Environment variable names forwarded from the caller's
            environment (``-e NAME`` without a value keeps secrets out of argv)
        command: Arguments passed to the image entrypoint

    Returns:
        Argument vector for ``docker run``
    """
    args = ["run", "-d", "--name", name]
    for host_port, container_port in (ports or {}).items():
        args.extend(["-p", f"{host_port}:{container_port}"])
    for volume, path in (volumes or {}).items():
        args.extend(["-v", f"{volume}:{path}"])
    for env_name in env_names:
        args.extend(["-e", env_name])
    args.append(image)
    args.extend(command)
    return args


def start_container(name: str) -> list[str]:
    return ["container", "start", name]


def stop_container(name: str) -> list[str]:
    return ["container", "stop", name]


def remove_container(name: str) -> list[str]:
    return ["container", "rm", name]


def remove_volume(name: str) -> list[str]:
    return ["volume", "rm", name]


def exec_in_container(
    name: str,
    command: Sequence[str],
    env_names: Iterable[str] = (),
) -> list[str]:
    """Run a command inside a running container with stdin attached."""
    args = ["exec"]
    for env_name in env_names:
        args.extend(["-e", env_name])
    args.extend(["-i", name])
    args.extend(command)
    return args
