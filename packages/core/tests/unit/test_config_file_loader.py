"""Tests for configuration file loader."""

import json
from pathlib import Path

import pytest
import yaml

from keyorchestrator.infrastructure.config.file_loader import (
    ConfigurationError,
    ConfigurationFileLoader,
)


class TestConfigurationFileLoader:
    """Tests for ConfigurationFileLoader."""

    def test_init_with_path(self, tmp_path: Path) -> None:
        """Test initialization with explicit file path."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("client: {}")

        loader = ConfigurationFileLoader(config_file_path=str(config_file))
        assert loader._config_path == config_file

    def test_init_with_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test initialization with environment variable."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("client: {}")

        monkeypatch.setenv("UKO_CONFIG_FILE", str(config_file))
        loader = ConfigurationFileLoader()
        assert loader._config_path == config_file

    def test_init_no_path_no_env(self) -> None:
        """Test initialization fails when no path provided and env var not set."""
        with pytest.raises(ConfigurationError, match="Configuration file path not provided"):
            ConfigurationFileLoader()

    def test_init_file_not_found(self, tmp_path: Path) -> None:
        """Test initialization fails when file does not exist."""
        with pytest.raises(ConfigurationError, match="Configuration file not found"):
            ConfigurationFileLoader(config_file_path=str(tmp_path / "nonexistent.yaml"))

    def test_load_yaml(self, tmp_path: Path) -> None:
        """Test loading YAML configuration file."""
        config_file = tmp_path / "config.yaml"
        config_data = {"client": {"url": "https://uko.example.com", "auth_type": "noauth"}}
        config_file.write_text(yaml.dump(config_data))

        assert ConfigurationFileLoader(config_file).load() == config_data

    def test_load_json(self, tmp_path: Path) -> None:
        """Test loading JSON configuration file."""
        config_file = tmp_path / "config.json"
        config_data = {"client": {"auth_type": "noauth", "enable_retries": True}}
        config_file.write_text(json.dumps(config_data))

        assert ConfigurationFileLoader(config_file).load() == config_data

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        """Test that an empty YAML file loads as an empty mapping."""
        config_file = tmp_path / "config.yml"
        config_file.write_text("")

        assert ConfigurationFileLoader(config_file).load() == {}

    def test_unsupported_format(self, tmp_path: Path) -> None:
        """Test that unknown extensions are rejected."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[client]")

        with pytest.raises(ConfigurationError, match="Unsupported configuration file format"):
            ConfigurationFileLoader(config_file).load()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that malformed YAML is reported."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("client: [unclosed")

        with pytest.raises(ConfigurationError, match="Invalid YAML format"):
            ConfigurationFileLoader(config_file).load()

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test that malformed JSON is reported."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Invalid JSON format"):
            ConfigurationFileLoader(config_file).load()

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        """Test that a top-level YAML list is rejected."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="must contain a dictionary"):
            ConfigurationFileLoader(config_file).load()


class TestLoadSettings:
    """Tests for ConfigurationFileLoader.load_settings."""

    def test_builds_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the client section becomes ClientSettings with env expansion."""
        monkeypatch.setenv("MY_UKO_KEY", "expanded-key")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "client:\n"
            "  url: https://uko.us-south.example.com:8081\n"
            "  auth_type: iam\n"
            "  apikey: ${MY_UKO_KEY}\n"
            "  enable_retries: true\n"
            "  max_retries: 3\n"
        )

        settings = ConfigurationFileLoader(config_file).load_settings()

        assert settings.url == "https://uko.us-south.example.com:8081"
        assert settings.apikey is not None
        assert settings.apikey.get_secret_value() == "expanded-key"
        assert settings.enable_retries is True
        assert settings.max_retries == 3

    def test_missing_client_section(self, tmp_path: Path) -> None:
        """Test that the client section is required."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("logging: {}")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationFileLoader(config_file).load_settings()
        assert exc_info.value.field == "client"

    def test_client_section_must_be_mapping(self, tmp_path: Path) -> None:
        """Test that a non-mapping client section is rejected."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("client: [1, 2]")

        with pytest.raises(ConfigurationError, match="must be a dictionary"):
            ConfigurationFileLoader(config_file).load_settings()

    def test_invalid_value_names_field(self, tmp_path: Path) -> None:
        """Test that invalid values are reported with their field."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("client:\n  auth_type: noauth\n  max_retries: 99\n")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationFileLoader(config_file).load_settings()
        assert exc_info.value.field == "max_retries"
        assert "max_retries" in str(exc_info.value)
