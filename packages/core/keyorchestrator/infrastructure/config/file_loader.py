"""Load client settings from YAML or JSON files."""

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, TextIO

import yaml
from pydantic import ValidationError as PydanticValidationError

from keyorchestrator.infrastructure.config.settings import ClientSettings

CONFIG_FILE_ENV = "UKO_CONFIG_FILE"
CLIENT_SECTION = "client"


class ConfigurationError(Exception):
    """Raised when a settings file is missing, unreadable or invalid."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)

    def __str__(self) -> str:
        if self.field:
            return f"Configuration error in field '{self.field}': {self.message}"
        return self.message


def _parse_yaml(stream: TextIO) -> Any:
    try:
        return yaml.safe_load(stream) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML format: {e}") from e


def _parse_json(stream: TextIO) -> Any:
    try:
        return json.load(stream)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON format: {e}") from e


_FORMATS: dict[str, tuple[str, Callable[[TextIO], Any]]] = {
    ".yaml": ("YAML", _parse_yaml),
    ".yml": ("YAML", _parse_yaml),
    ".json": ("JSON", _parse_json),
}


class ConfigurationFileLoader:
    """Reads ClientSettings from the ``client`` section of a file.

    ```yaml
    client:
      url: https://uko.us-south.hs-crypto.appdomain.cloud:8081
      auth_type: iam
      apikey: ${UKO_APIKEY}
      enable_retries: true
    ```

    ``${VAR}`` references in string values are expanded from the
    environment, so secrets can stay out of the file.
    """

    def __init__(self, config_file_path: str | Path | None = None) -> None:
        """Initialize ConfigurationFileLoader.

        Args:
            config_file_path: File to read. Defaults to ``$UKO_CONFIG_FILE``.

        Raises:
            ConfigurationError: If no path is given or the file does not exist.
        """
        path = config_file_path or os.getenv(CONFIG_FILE_ENV)
        if not path:
            raise ConfigurationError(
                f"Configuration file path not provided and {CONFIG_FILE_ENV} "
                "environment variable is not set"
            )

        self._config_path = Path(path)
        if not self._config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {self._config_path}")

    def load(self) -> dict[str, Any]:
        """Parse the whole file, choosing the format by extension.

        Raises:
            ConfigurationError: If the format is unsupported, the file cannot be
                read or parsed, or its top level is not a mapping.
        """
        suffix = self._config_path.suffix.lower()
        if suffix not in _FORMATS:
            raise ConfigurationError(
                f"Unsupported configuration file format: {suffix or '(none)'}. "
                f"Supported formats: {', '.join(_FORMATS)}"
            )

        format_name, parse = _FORMATS[suffix]
        try:
            with self._config_path.open(encoding="utf-8") as stream:
                data = parse(stream)
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{format_name} file must contain a dictionary/mapping, "
                f"got {type(data).__name__}"
            )
        return data

    def load_settings(self) -> ClientSettings:
        """Build ClientSettings from the ``client`` section.

        Raises:
            ConfigurationError: If the section is missing or a value is invalid.
                ``field`` names the offending setting.
        """
        section = self.load().get(CLIENT_SECTION)
        if section is None:
            raise ConfigurationError(
                f"Configuration must contain a '{CLIENT_SECTION}' section",
                field=CLIENT_SECTION,
            )
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"Configuration '{CLIENT_SECTION}' must be a dictionary",
                field=CLIENT_SECTION,
            )

        expanded = {
            key: os.path.expandvars(value) if isinstance(value, str) else value
            for key, value in section.items()
        }
        try:
            return ClientSettings.from_dict(expanded)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ConfigurationError(first.get("msg", str(e)), field=field) from e
