"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from figma_assets.exceptions import ConfigurationError
from figma_assets.models.config import FigmaConfig

log = logging.getLogger(__name__)

DEFAULT_SCALE = 1.0

# Environment variables take precedence over the INI file
ENV_OVERRIDES = {
    "FIGMA_TOKEN": "token",
    "FIGMA_FILE_KEY": "file_key",
    "FIGMA_NODE_IDS": "node_ids",
}


def _split_ids(raw: str) -> list[str]:
    return [s.strip() for s in raw.split(",") if s.strip()]


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser()

    def load_config(self, cli_options: dict[str, Any] | None = None) -> FigmaConfig:
        """
        Loads configuration from the INI file and the environment, applies CLI
        overrides, and validates it.

        The INI file is optional as long as the token and file key are provided
        some other way.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated FigmaConfig object.

        Raises:
            ConfigurationError: If the config file is invalid or validation fails.
        """
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e

            if self._migrate_if_needed():
                log.info(
                    "[yellow]Configuration file was updated with new default values."
                    "[/yellow]"
                )
        else:
            log.debug(f"No configuration file at '{self.config_file_path}'.")

        config = self._get_config_as_dict()
        config.update(self._get_env_overrides())

        if cli_options:
            config.update(cli_options)

        try:
            config_dir = self.config_file_path.parent
            return FigmaConfig(**config, config_path=str(config_dir))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save.
        """
        config = configparser.ConfigParser()
        config["DEFAULT"] = {}

        for key in sorted(FigmaConfig.get_ini_keys()):
            value = settings.get(key, self._default_for(key))
            if isinstance(value, list):
                config["DEFAULT"][key] = ",".join(map(str, value))
            elif value is not None:
                config["DEFAULT"][key] = str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def get_raw_config(self) -> dict[str, Any]:
        """Reads the INI file as-is, without environment or CLI overrides."""
        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e
        return self._get_config_as_dict()

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        try:
            scale = section.getfloat("scale", DEFAULT_SCALE)
        except ValueError as e:
            raise ConfigurationError(f"Invalid 'scale' in config file: {e}") from e
        return {
            "token": section.get("token", ""),
            "file_key": section.get("file_key", ""),
            "node_ids": _split_ids(section.get("node_ids", "")),
            "scale": scale,
        }

    def _get_env_overrides(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for env_var, key in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if not value:
                continue
            overrides[key] = _split_ids(value) if key == "node_ids" else value
            log.debug(f"Using {env_var} from the environment.")
        return overrides

    @staticmethod
    def _default_for(key: str) -> Any:
        if key == "scale":
            return DEFAULT_SCALE
        if key == "node_ids":
            return []
        return ""

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        needs_saving = False
        config_section = self._parser["DEFAULT"]

        for key in sorted(FigmaConfig.get_ini_keys()):
            if key not in config_section:
                default_value = self._default_for(key)
                if isinstance(default_value, list):
                    config_section[key] = ",".join(map(str, default_value))
                else:
                    config_section[key] = str(default_value)

                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{config_section[key]}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
