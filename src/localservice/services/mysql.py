"""MySQL service."""

from __future__ import annotations

import re

import structlog

from ..runtime import commands
from .base import ServiceLifecycle, wait_settings
from .settings import ConfigKey

logger = structlog.get_logger(__name__)

MYSQL_PORT = 3306
MYSQL_PATH = "/var/lib/mysql"

UPTIME_PATTERN = re.compile(r"^Uptime:\s*(\d+)")

PREPARE_ROOT_USER_SQL = "UPDATE mysql.user SET host='%' WHERE user='root'; FLUSH PRIVILEGES;"


def quote_identifier(name: str) -> str:
    """Quote a MySQL identifier with backticks."""
    return "`" + name.replace("`", "``") + "`"


def parse_uptime(output: str) -> int:
    """Extract the uptime seconds from ``mysqladmin status`` output (0 if absent)."""
    match = UPTIME_PATTERN.match(output.strip())
    return int(match.group(1)) if match else 0


class MySQLService(ServiceLifecycle):
    """MySQL database container."""

    name = "mysql"
    display_name = "MySQL"
    prefix = "MYSQL"
    seed_key = "MYSQL_SEED_FILES"
    catalog = (
        ConfigKey(
            key="MYSQL_CONTAINER_NAME",
            description="Name used to identify MySQL Service Docker container",
            required=True,
        ),
        ConfigKey(
            key="MYSQL_DATABASE",
            description="Name used to identify MySQL Service database",
            required=True,
        ),
        ConfigKey(
            key="MYSQL_EXPOSED_PORT",
            description="Local network port used to expose MySQL Service",
            required=True,
            default=str(MYSQL_PORT),
        ),
        ConfigKey(
            key="MYSQL_IMAGE",
            description=(
                "MySQL Server Docker image for your processor: "
                "https://hub.docker.com/r/mysql/mysql-server/tags"
            ),
            required=True,
        ),
        ConfigKey(
            key="MYSQL_PATH",
            description="Path to the preferred MySQL Service library file folder",
            required=True,
            default=MYSQL_PATH,
        ),
        ConfigKey(
            key="MYSQL_ROOT_PASSWORD",
            description="Password to use when creating the MySQL Service database root user",
            required=True,
        ),
        ConfigKey(
            key="MYSQL_SEED_FILES",
            description=(
                "Path to SQL seed file glob(s) to execute during first time setup "
                "(separate by commas)"
            ),
        ),
        *wait_settings("MYSQL", "MySQL"),
    )

    def run_command(self) -> list[str]:
        name = self.container_name
        return commands.run_container(
            name=name,
            image=self.config.get("MYSQL_IMAGE"),
            ports={self.config.get_int("MYSQL_EXPOSED_PORT"): MYSQL_PORT},
            volumes={name: self.config.get("MYSQL_PATH")},
            env_names=self.run_env().keys(),
        )

    def run_env(self) -> dict[str, str]:
        return {"MYSQL_ROOT_PASSWORD": self.config.get("MYSQL_ROOT_PASSWORD")}

    def exec_env(self) -> dict[str, str]:
        return {"MYSQL_PWD": self.config.get("MYSQL_ROOT_PASSWORD")}

    async def is_service_ready(self) -> bool:
        output = await self.exec(["mysqladmin", "-u", "root", "status"])
        return parse_uptime(output) > 0

    async def setup(self) -> None:
        await self.prepare_root_user()
        await self.create_database()

    async def prepare_root_user(self) -> None:
        """Allow the root user to connect from any host."""
        await self.exec(["mysql", "-u", "root", "-e", PREPARE_ROOT_USER_SQL])
        logger.info("root_user_prepared", container=self.container_name)
        self.report("Prepared MySQL root user")

    async def create_database(self) -> None:
        database = quote_identifier(self.config.get("MYSQL_DATABASE"))
        await self.exec(["mysql", "-u", "root", "-e", f"CREATE DATABASE IF NOT EXISTS {database};"])
        logger.info("database_created", container=self.container_name)
        self.report("Created MySQL database")

    def seed_command(self) -> list[str]:
        return ["mysql", "-u", "root", self.config.get("MYSQL_DATABASE")]
