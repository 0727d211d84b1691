"""Shared test fixtures for localservice tests.

This module provides:
- FakeDocker: in-memory stand-in for RuntimeGateway that simulates docker
  containers/volumes and records every command
- Environment fixtures for each service
"""

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

import pytest

from localservice.errors import RuntimeInvocationError
from localservice.services import ServiceOptions, load_service_config

# =============================================================================
# Fake docker runtime
# =============================================================================


@dataclass
class RecordedCall:
    """One command issued through the fake gateway."""

    args: list[str]
    env: dict[str, str]
    input: bytes | None = None

    @property
    def program(self) -> str | None:
        """Client program for exec calls (e.g. "psql")."""
        if self.args[0] != "exec":
            return None
        return self.args[self.args.index("-i") + 2]


def default_exec_output(args: list[str], input: bytes | None) -> str:
    """Healthy responses for the database clients."""
    program = args[args.index("-i") + 2]
    if program == "mysqladmin":
        return "Uptime: 42  Threads: 2  Questions: 8  Slow queries: 0  Opens: 115"
    if program == "pg_isready":
        return "/var/run/postgresql:5432 - accepting connections"
    return ""


@dataclass
class FakeDocker:
    """Simulated docker CLI with named containers, running set and volumes."""

    containers: dict[str, str] = field(default_factory=dict)
    running: set[str] = field(default_factory=set)
    volumes: set[str] = field(default_factory=set)
    extra_running: list[str] = field(default_factory=list)
    exec_output: Callable[[list[str], bytes | None], str] = default_exec_output
    fail: Callable[[list[str]], bool] | None = None
    echo_override: str | None = None
    calls: list[RecordedCall] = field(default_factory=list)

    def add_container(self, name: str, running: bool = False) -> None:
        self.containers[name] = f"id-{name}"
        self.volumes.add(name)
        if running:
            self.running.add(name)

    @property
    def mutating_calls(self) -> list[RecordedCall]:
        return [call for call in self.calls if call.args[0] not in ("ps", "exec")]

    def commands(self) -> list[list[str]]:
        return [call.args for call in self.calls]

    def exec_calls(self, program: str | None = None) -> list[RecordedCall]:
        return [
            call
            for call in self.calls
            if call.args[0] == "exec" and (program is None or call.program == program)
        ]

    async def run(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        input: bytes | None = None,
    ) -> str:
        args = list(args)
        self.calls.append(RecordedCall(args, dict(env or {}), input))

        if self.fail and self.fail(args):
            raise RuntimeInvocationError(
                message=f"Command failed (1): docker {' '.join(args)}",
                command=["docker", *args],
                returncode=1,
            )

        if args[:2] == ["ps", "-a"]:
            pattern = args[args.index("--filter") + 1].removeprefix("name=")
            return "\n".join(
                container_id
                for name, container_id in self.containers.items()
                if re.search(pattern, f"/{name}")
            )
        if args[:2] == ["ps", "--format"]:
            return "\n".join(sorted(self.running) + self.extra_running)
        if args[0] == "run":
            name = args[args.index("--name") + 1]
            self.add_container(name, running=True)
            return self.containers[name]
        if args[0] == "exec":
            return self.exec_output(args, input)

        name = args[-1]
        if args[:2] == ["container", "start"]:
            self.running.add(name)
        elif args[:2] == ["container", "stop"]:
            self.running.discard(name)
        elif args[:2] == ["container", "rm"]:
            self.containers.pop(name, None)
        elif args[:2] == ["volume", "rm"]:
            self.volumes.discard(name)
        return self.echo_override if self.echo_override is not None else name


@pytest.fixture
def fake_docker() -> FakeDocker:
    """Fixture providing an empty fake docker runtime."""
    return FakeDocker()


# =============================================================================
# Service environments
# =============================================================================


@pytest.fixture
def mysql_env() -> dict[str, str]:
    return {
        "MYSQL_CONTAINER_NAME": "app-mysql",
        "MYSQL_DATABASE": "app",
        "MYSQL_IMAGE": "mysql/mysql-server:8.0",
        "MYSQL_ROOT_PASSWORD": "s3cret",
        "MYSQL_SERVICE_WAIT_INTERVAL": "0",
    }


@pytest.fixture
def postgres_env() -> dict[str, str]:
    return {
        "POSTGRES_CONTAINER_NAME": "app-postgres",
        "POSTGRES_DATABASE": "app",
        "POSTGRES_IMAGE": "postgres:16",
        "POSTGRES_SUPER_USER": "admin",
        "POSTGRES_SUPER_PASSWORD": "s3cret",
        "POSTGRES_SERVICE_WAIT_INTERVAL": "0",
    }


@pytest.fixture
def minio_env() -> dict[str, str]:
    return {
        "MINIO_CONTAINER_NAME": "app-minio",
        "MINIO_IMAGE": "minio/minio:latest",
        "MINIO_ROOT_USER": "minio",
        "MINIO_ROOT_PASSWORD": "s3cret123",
    }


@pytest.fixture
def make_service(tmp_path):
    """Factory building a service against a fake runtime.

    Progress messages are collected on ``service.messages``.
    """

    def _make(service_class, environ, gateway, **options):
        config = load_service_config(service_class.catalog, environ)
        messages: list[str] = []
        options.setdefault("cwd", tmp_path)
        service = service_class(
            config,
            gateway,
            ServiceOptions(on_progress=messages.append, **options),
        )
        service.messages = messages
        return service

    return _make
