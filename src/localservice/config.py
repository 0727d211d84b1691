"""CLI configuration management.

Loads the working directory's .env file and resolves the CLI's own settings.
Service settings are resolved separately from the same environment by
localservice.services.settings.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

# Default values
DEFAULT_LOG_LEVEL = "warning"
DEFAULT_ENV_FILE = ".env"

# Environment variable mappings
ENV_VARS = {
    "verbose": "LOCALSERVICE_VERBOSE",
    "strict_status": "LOCALSERVICE_STRICT_STATUS",
    "log_level": "LOCALSERVICE_LOG_LEVEL",
    "log_file": "LOCALSERVICE_LOG_FILE",
    "log_format": "LOCALSERVICE_LOG_FORMAT",
}

LOG_FORMATS = ("console", "json")

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class CLIConfig:
    """CLI configuration."""

    verbose: bool = False
    strict_status: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str | None = None
    log_format: str = "console"

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    @property
    def effective_log_level(self) -> str:
        """Verbose mode lowers the log level to debug."""
        return "debug" if self.verbose else self.log_level


def load_env_file(cwd: Path | None = None) -> Path | None:
    """Load ``.env`` from the working directory into os.environ.

    Existing environment variables are never overridden.

    Returns:
        Path of the loaded file, or None if there was none.
    """
    env_path = (cwd or Path.cwd()) / DEFAULT_ENV_FILE
    if not env_path.is_file():
        return None
    load_dotenv(env_path, override=False)
    return env_path


def _is_true(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES


def load_config(
    environ: Mapping[str, str] | None = None,
    verbose: bool | None = None,
    strict_status: bool | None = None,
) -> CLIConfig:
    """Load CLI configuration.

    Precedence (highest to lowest):
    1. CLI flags
    2. Environment variables
    3. Defaults

    Args:
        environ: Environment mapping (defaults to os.environ)
        verbose: Value of the --verbose flag, if given
        strict_status: Value of the --strict-status flag, if given

    Returns:
        CLIConfig with values and sources
    """
    env = os.environ if environ is None else environ
    config = CLIConfig()
    sources: dict[str, str] = {key: "default" for key in ENV_VARS}

    if env.get(ENV_VARS["verbose"]):
        config.verbose = _is_true(env[ENV_VARS["verbose"]])
        sources["verbose"] = "environment"
    if env.get(ENV_VARS["strict_status"]):
        config.strict_status = _is_true(env[ENV_VARS["strict_status"]])
        sources["strict_status"] = "environment"
    if env.get(ENV_VARS["log_level"]):
        config.log_level = env[ENV_VARS["log_level"]].strip().lower()
        sources["log_level"] = "environment"
    if env.get(ENV_VARS["log_file"]):
        config.log_file = env[ENV_VARS["log_file"]]
        sources["log_file"] = "environment"
    if env.get(ENV_VARS["log_format"]):
        log_format = env[ENV_VARS["log_format"]].strip().lower()
        if log_format not in LOG_FORMATS:
            raise ConfigurationError(
                message=(
                    f"Environment variable {ENV_VARS['log_format']} must be one of "
                    f"{', '.join(LOG_FORMATS)} (got {log_format!r})"
                ),
            )
        config.log_format = log_format
        sources["log_format"] = "environment"

    # CLI flags only count when set
    if verbose:
        config.verbose = True
        sources["verbose"] = "flag"
    if strict_status:
        config.strict_status = True
        sources["strict_status"] = "flag"

    config._sources = sources
    return config
