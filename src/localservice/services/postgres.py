"""PostgreSQL service."""

from __future__ import annotations

import structlog

from ..runtime import commands
from .base import ServiceLifecycle, wait_settings
from .settings import ConfigKey

logger = structlog.get_logger(__name__)

POSTGRES_PORT = 5432
POSTGRES_PATH = "/var/lib/postgresql/data"

READY_MARKER = "accepting connections"


def quote_identifier(name: str) -> str:
    """Quote a PostgreSQL identifier with double quotes."""
    return '"' + name.replace('"', '""') + '"'


class PostgresService(ServiceLifecycle):
    """PostgreSQL database container."""

    name = "postgres"
    display_name = "PostgreSQL"
    prefix = "POSTGRES"
    seed_key = "POSTGRES_PUSH_FILES"
    catalog = (
        ConfigKey(
            key="POSTGRES_CONTAINER_NAME",
            description="Name used to identify PostgreSQL Service Docker container",
            required=True,
        ),
        ConfigKey(
            key="POSTGRES_DATABASE",
            description="Name used to identify PostgreSQL Service database",
            required=True,
        ),
        ConfigKey(
            key="POSTGRES_EXPOSED_PORT",
            description="Local network port used to expose PostgreSQL Service",
            required=True,
            default=str(POSTGRES_PORT),
        ),
        ConfigKey(
            key="POSTGRES_IMAGE",
            description=(
                "PostgreSQL Server Docker image for your processor: "
                "https://hub.docker.com/_/postgres/tags"
            ),
            required=True,
        ),
        ConfigKey(
            key="POSTGRES_PATH",
            description="Path to the preferred PostgreSQL Service library file folder",
            required=True,
            default=POSTGRES_PATH,
        ),
        ConfigKey(
            key="POSTGRES_PUSH_FILES",
            description=(
                "Path to SQL file glob(s) to push (execute) during first time setup "
                "(separated by commas)"
            ),
        ),
        ConfigKey(
            key="POSTGRES_SUPER_USER",
            description=(
                "Username to use when creating the PostgreSQL Service database "
                "SuperUser account"
            ),
            required=True,
        ),
        ConfigKey(
            key="POSTGRES_SUPER_PASSWORD",
            description=(
                "Password to use when creating the PostgreSQL Service database "
                "SuperUser account"
            ),
            required=True,
        ),
        *wait_settings("POSTGRES", "PostgreSQL"),
    )

    @property
    def super_user(self) -> str:
        return self.config.get("POSTGRES_SUPER_USER")

    def run_command(self) -> list[str]:
        name = self.container_name
        return commands.run_container(
            name=name,
            image=self.config.get("POSTGRES_IMAGE"),
            ports={self.config.get_int("POSTGRES_EXPOSED_PORT"): POSTGRES_PORT},
            volumes={name: self.config.get("POSTGRES_PATH")},
            env_names=self.run_env().keys(),
        )

    def run_env(self) -> dict[str, str]:
        return {
            "POSTGRES_USER": self.super_user,
            "POSTGRES_PASSWORD": self.config.get("POSTGRES_SUPER_PASSWORD"),
        }

    def exec_env(self) -> dict[str, str]:
        return {
            "PGUSER": self.super_user,
            "PGPASSWORD": self.config.get("POSTGRES_SUPER_PASSWORD"),
        }

    async def is_service_ready(self) -> bool:
        output = await self.exec(["pg_isready"])
        return READY_MARKER in output

    async def setup(self) -> None:
        await self.create_database()

    async def create_database(self) -> None:
        database = quote_identifier(self.config.get("POSTGRES_DATABASE"))
        await self.exec(["psql", "-U", self.super_user, "-c", f"CREATE DATABASE {database}"])
        logger.info("database_created", container=self.container_name)
        self.report("Created PostgreSQL database")

    def seed_command(self) -> list[str]:
        return [
            "psql",
            "-v",
            "ON_ERROR_STOP=1",
            "-U",
            self.super_user,
            "-d",
            self.config.get("POSTGRES_DATABASE"),
        ]
