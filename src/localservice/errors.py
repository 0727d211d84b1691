"""Error taxonomy for localservice.

Every failure surfaced to the CLI derives from LocalServiceError and carries a
human-readable message plus optional structured data for logging.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LocalServiceError(Exception):
    """Base error class for localservice errors."""

    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


@dataclass
class ConfigurationError(LocalServiceError):
    """Required configuration is missing or malformed."""

    missing_keys: list[str] = field(default_factory=list)

    @classmethod
    def missing(cls, keys: list[str]) -> "ConfigurationError":
        """Build an aggregated error naming every missing key."""
        return cls(
            message=f"Missing required environment variables: {', '.join(keys)}",
            missing_keys=list(keys),
        )


@dataclass
class StateConflictError(LocalServiceError):
    """Container state does not allow the requested operation."""


@dataclass
class RuntimeInvocationError(LocalServiceError):
    """A docker or client invocation failed or returned an unexpected result."""

    command: list[str] = field(default_factory=list)
    returncode: int | None = None


@dataclass
class ReadinessTimeoutError(LocalServiceError):
    """Readiness probe never succeeded within the configured retries."""

    attempts: int = 0


@dataclass
class SeedResolutionError(LocalServiceError):
    """Seed file patterns matched no files."""

    patterns: list[str] = field(default_factory=list)


@dataclass
class UnsupportedServiceError(LocalServiceError):
    """Requested service name is not in the registry."""

    service: str = ""
