"""Service configuration: catalog entries, loading, and validation.

A ServiceConfig is assembled once from an environment mapping and a static
catalog. Service classes never read os.environ themselves.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from ..errors import ConfigurationError


@dataclass(frozen=True)
class ConfigKey:
    """Static catalog entry for one configuration key."""

    key: str
    description: str
    required: bool = False
    default: str | int | None = None


@dataclass
class ConfigValue:
    """Resolved configuration value."""

    key: str
    value: str | int | None
    required: bool = False
    default: str | int | None = None
    description: str = ""
    source: str = "unset"

    @property
    def is_empty(self) -> bool:
        return self.value is None or str(self.value).strip() == ""


@dataclass
class ServiceConfig:
    """Ordered mapping of configuration key to resolved value."""

    values: dict[str, ConfigValue] = field(default_factory=dict)

    def __getitem__(self, key: str) -> ConfigValue:
        return self.values[key]

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def __iter__(self) -> Iterator[ConfigValue]:
        return iter(self.values.values())

    def __len__(self) -> int:
        return len(self.values)

    def get(self, key: str) -> str | None:
        """Get a value as a string, or None if unset."""
        entry = self.values.get(key)
        if entry is None or entry.is_empty:
            return None
        return str(entry.value).strip()

    def get_int(self, key: str) -> int:
        """Get a value as an integer.

        Raises:
            ConfigurationError: If the value is unset or not an integer.
        """
        raw = self.get(key)
        try:
            return int(raw)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise ConfigurationError(
                message=f"Environment variable {key} must be an integer (got {raw!r})",
                data={"key": key, "value": raw},
            ) from None

    def missing_keys(self) -> list[str]:
        """Keys that are required but resolve to an empty value."""
        return [entry.key for entry in self if entry.required and entry.is_empty]


def load_service_config(
    catalog: Iterable[ConfigKey],
    environ: Mapping[str, str],
) -> ServiceConfig:
    """Build a ServiceConfig from a catalog and an environment mapping.

    Precedence (highest to lowest):
    1. Non-empty environment value
    2. Catalog default

    Args:
        catalog: Static key definitions for the service
        environ: Environment mapping (typically os.environ after .env loading)

    Returns:
        ServiceConfig in catalog order
    """
    values: dict[str, ConfigValue] = {}
    for entry in catalog:
        env_value = environ.get(entry.key)
        if env_value is not None and env_value.strip() != "":
            value: str | int | None = env_value
            source = "environment"
        elif entry.default is not None:
            value = entry.default
            source = "default"
        else:
            value = None
            source = "unset"
        values[entry.key] = ConfigValue(
            key=entry.key,
            value=value,
            required=entry.required,
            default=entry.default,
            description=entry.description,
            source=source,
        )
    return ServiceConfig(values)


def validate(config: ServiceConfig) -> None:
    """Check that every required key has a value.

    Raises:
        ConfigurationError: Naming every missing key at once.
    """
    missing = config.missing_keys()
    if missing:
        raise ConfigurationError.missing(missing)
