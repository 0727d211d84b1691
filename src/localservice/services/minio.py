"""MinIO object storage service.

MinIO has no database to prepare: create only runs the container and does not
wait for readiness. Push is not implemented.

MINIO_SERVICE_WAIT_* and MINIO_SEED_FILES are listed by info for reference only;
nothing reads them.
"""

from __future__ import annotations

import structlog

from ..runtime import commands
from .base import ServiceLifecycle, wait_settings
from .settings import ConfigKey, validate

logger = structlog.get_logger(__name__)

MINIO_PORT = 9000
MINIO_WEB_PORT = 9001
MINIO_PATH = "/data"


class MinIOService(ServiceLifecycle):
    """MinIO (S3 compatible) object storage container."""

    name = "minio"
    display_name = "MinIO"
    prefix = "MINIO"
    readiness_gated = False
    catalog = (
        ConfigKey(
            key="MINIO_CONTAINER_NAME",
            description="Name used to identify MinIO Service Docker container",
            required=True,
        ),
        ConfigKey(
            key="MINIO_EXPOSED_PORT",
            description="Local network port used to expose MinIO Service",
            required=True,
            default=str(MINIO_PORT),
        ),
        ConfigKey(
            key="MINIO_EXPOSED_WEB_PORT",
            description="Local network port used to expose MinIO Web Console",
            required=True,
            default=str(MINIO_WEB_PORT),
        ),
        ConfigKey(
            key="MINIO_IMAGE",
            description=(
                "MinIO Server Docker image for your processor: "
                "https://hub.docker.com/r/minio/minio/tags"
            ),
            required=True,
        ),
        ConfigKey(
            key="MINIO_PATH",
            description="Path to the preferred MinIO Service library file folder",
            required=True,
            default=MINIO_PATH,
        ),
        ConfigKey(
            key="MINIO_ROOT_USER",
            description="Username to use when creating the MinIO Service root user",
            required=True,
        ),
        ConfigKey(
            key="MINIO_ROOT_PASSWORD",
            description="Password to use when creating the MinIO Service root user",
            required=True,
        ),
        *wait_settings("MINIO", "MinIO"),
        ConfigKey(
            key="MINIO_SEED_FILES",
            description=(
                "Path to MinIO object storage seed file glob(s) to import during "
                "first time setup (separate by commas)"
            ),
        ),
    )

    def run_command(self) -> list[str]:
        name = self.container_name
        web_port = self.config.get_int("MINIO_EXPOSED_WEB_PORT")
        path = self.config.get("MINIO_PATH")
        return commands.run_container(
            name=name,
            image=self.config.get("MINIO_IMAGE"),
            ports={
                self.config.get_int("MINIO_EXPOSED_PORT"): MINIO_PORT,
                web_port: MINIO_WEB_PORT,
            },
            volumes={name: path},
            env_names=self.run_env().keys(),
            command=["server", "--console-address", f":{MINIO_WEB_PORT}", path],
        )

    def run_env(self) -> dict[str, str]:
        return {
            "MINIO_ROOT_USER": self.config.get("MINIO_ROOT_USER"),
            "MINIO_ROOT_PASSWORD": self.config.get("MINIO_ROOT_PASSWORD"),
        }

    async def push(self) -> bool:
        """Report that pushing objects is not supported."""
        validate(self.config)
        logger.info("push_not_implemented", service=self.name)
        self.report("Push is not implemented for MinIO")
        return False
