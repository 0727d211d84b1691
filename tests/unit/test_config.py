"""Unit tests for CLI configuration."""

import os

import pytest

from localservice.config import CLIConfig, load_config, load_env_file
from localservice.errors import ConfigurationError


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults(self):
        config = load_config(environ={})

        assert config.verbose is False
        assert config.strict_status is False
        assert config.log_level == "warning"
        assert config.get_source("verbose") == "default"

    def test_environment(self):
        config = load_config(
            environ={
                "LOCALSERVICE_VERBOSE": "true",
                "LOCALSERVICE_STRICT_STATUS": "1",
                "LOCALSERVICE_LOG_LEVEL": "INFO",
                "LOCALSERVICE_LOG_FILE": "/tmp/localservice.log",
            }
        )

        assert config.verbose is True
        assert config.strict_status is True
        assert config.log_level == "info"
        assert config.log_file == "/tmp/localservice.log"
        assert config.get_source("strict_status") == "environment"

    def test_false_environment_value(self):
        config = load_config(environ={"LOCALSERVICE_VERBOSE": "no"})
        assert config.verbose is False

    def test_flags_override_environment(self):
        """Test CLI flags take precedence over the environment."""
        config = load_config(environ={"LOCALSERVICE_VERBOSE": "0"}, verbose=True)

        assert config.verbose is True
        assert config.get_source("verbose") == "flag"

    def test_log_format(self):
        assert load_config(environ={}).log_format == "console"
        assert load_config(environ={"LOCALSERVICE_LOG_FORMAT": "JSON"}).log_format == "json"

    def test_invalid_log_format(self):
        with pytest.raises(ConfigurationError, match="LOCALSERVICE_LOG_FORMAT"):
            load_config(environ={"LOCALSERVICE_LOG_FORMAT": "xml"})

    def test_effective_log_level(self):
        assert CLIConfig(verbose=True).effective_log_level == "debug"
        assert CLIConfig(log_level="error").effective_log_level == "error"


class TestLoadEnvFile:
    """Tests for .env loading."""

    def test_missing_file(self, tmp_path):
        assert load_env_file(tmp_path) is None

    def test_loads_without_override(self, tmp_path, monkeypatch):
        """Test .env values fill gaps but never replace the environment."""
        monkeypatch.setenv("LS_TEST_EXISTING", "from-shell")
        monkeypatch.delenv("LS_TEST_NEW", raising=False)
        (tmp_path / ".env").write_text("LS_TEST_EXISTING=from-file\nLS_TEST_NEW=added\n")

        try:
            assert load_env_file(tmp_path) == tmp_path / ".env"
            assert os.environ["LS_TEST_EXISTING"] == "from-shell"
            assert os.environ["LS_TEST_NEW"] == "added"
        finally:
            os.environ.pop("LS_TEST_NEW", None)
