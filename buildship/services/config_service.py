"""
Configuration Loading Service

Reads buildship.yml into PackageConfig / DeployConfig.

Layout:

    package:
      enabled: true
      source_dir: dist
      archive_name: build.zip
    deploy:
      enabled: true
      host: example.com
      username: deploy
      password: ${DEPLOY_PASSWORD}
      remote_archive_path: /tmp/build.zip
      remote_extract_dir: /var/www/app
      commands:
        - systemctl reload nginx

String values may reference environment variables as ${NAME} or
${NAME:-default}. A .env file next to the config supplies values the process
environment does not define.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from dotenv import dotenv_values

from buildship.constants import DEFAULT_CONFIG_FILE
from buildship.exceptions import ConfigurationError
from buildship.models.config import DeployConfig, PackageConfig

ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

PACKAGE_KEYS = {
    "enabled": "enabled",
    "enable": "enabled",
    "source_dir": "source_dir",
    "localDir": "source_dir",
    "archive_name": "archive_name",
    "zipFileName": "archive_name",
}

DEPLOY_KEYS = {
    "enabled": "enabled",
    "enable": "enabled",
    "host": "host",
    "port": "port",
    "username": "username",
    "password": "password",
    "private_key": "private_key",
    "privateKey": "private_key",
    "passphrase": "passphrase",
    "remote_archive_path": "remote_archive_path",
    "remoteZipPath": "remote_archive_path",
    "remote_extract_dir": "remote_extract_dir",
    "remoteUnzipDir": "remote_extract_dir",
    "commands": "commands",
    "known_hosts": "known_hosts",
    "connect_timeout": "connect_timeout",
    "transfer_timeout": "transfer_timeout",
    "command_timeout": "command_timeout",
    "stderr_policy": "stderr_policy",
}

BOOL_FIELDS = {"enabled"}
INT_FIELDS = {"port"}
FLOAT_FIELDS = {"connect_timeout", "transfer_timeout", "command_timeout"}
STRING_FIELDS = {
    "source_dir",
    "archive_name",
    "host",
    "username",
    "password",
    "private_key",
    "passphrase",
    "remote_archive_path",
    "remote_extract_dir",
    "known_hosts",
}


class ConfigService:
    """Loads pipeline configuration from YAML with environment interpolation."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize config service.

        Args:
            config_path: Explicit config file; when None, buildship.yml in the
                working directory is used if present
        """
        self.explicit = config_path is not None
        self.config_path = Path(config_path) if config_path else Path.cwd() / DEFAULT_CONFIG_FILE

    def load_raw(self) -> Dict[str, Any]:
        """
        Read the YAML document.

        Returns:
            Parsed mapping ({} when no default config file exists)

        Raises:
            ConfigurationError: If the file is missing (explicit path) or malformed
        """
        if not self.config_path.exists():
            if self.explicit:
                raise ConfigurationError(f"Config file not found: {self.config_path}")
            return {}

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}", [str(e)]) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.config_path} must contain a mapping")

        unknown = set(data) - {"package", "deploy"}
        if unknown:
            raise ConfigurationError(
                f"Unknown sections in {self.config_path}",
                [f"Unknown section: {name}" for name in sorted(unknown)],
            )

        return self.interpolate(data, self.environment())

    def environment(self) -> Dict[str, str]:
        """Process environment layered over the .env file beside the config."""
        env: Dict[str, str] = {}
        env_file = self.config_path.parent / ".env"
        if env_file.exists():
            env.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
        env.update(os.environ)
        return env

    def interpolate(self, value: Any, env: Dict[str, str]) -> Any:
        """Replace ${NAME} references in every string value."""
        if isinstance(value, dict):
            return {key: self.interpolate(item, env) for key, item in value.items()}
        if isinstance(value, list):
            return [self.interpolate(item, env) for item in value]
        if not isinstance(value, str):
            return value

        def replace(match: re.Match) -> str:
            name, default = match.group(1), match.group(2)
            if name in env:
                return env[name]
            if default is not None:
                return default
            raise ConfigurationError(
                f"Environment variable '{name}' is not set",
                [f"Referenced in {self.config_path}"],
            )

        return ENV_REFERENCE.sub(replace, value)

    def load(
        self,
        package_overrides: Optional[Dict[str, Any]] = None,
        deploy_overrides: Optional[Dict[str, Any]] = None,
    ) -> Tuple[PackageConfig, DeployConfig]:
        """
        Build both stage configs from the file plus overrides.

        Overrides with a None value are ignored. Callbacks and observers can
        only be supplied through overrides.

        Raises:
            ConfigurationError: Unknown keys or values of the wrong type
        """
        raw = self.load_raw()

        package_values = self._section(raw.get("package"), PACKAGE_KEYS, "package")
        deploy_values = self._section(raw.get("deploy"), DEPLOY_KEYS, "deploy")

        package_values.update({k: v for k, v in (package_overrides or {}).items() if v is not None})
        deploy_values.update({k: v for k, v in (deploy_overrides or {}).items() if v is not None})

        return PackageConfig(**package_values), DeployConfig(**deploy_values)

    def _section(self, section: Any, aliases: Dict[str, str], name: str) -> Dict[str, Any]:
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"Section '{name}' must be a mapping")

        values: Dict[str, Any] = {}
        errors = []
        for key, value in section.items():
            field_name = aliases.get(key)
            if field_name is None:
                errors.append(f"Unknown key in '{name}': {key}")
                continue
            try:
                values[field_name] = self._coerce(field_name, value)
            except ValueError as e:
                errors.append(f"{name}.{key}: {e}")

        if errors:
            raise ConfigurationError(f"Invalid '{name}' section in {self.config_path}", errors)
        return values

    @staticmethod
    def _coerce(field_name: str, value: Any) -> Any:
        # YAML reads all-digit passwords and names as numbers
        if field_name in STRING_FIELDS and isinstance(value, (int, float)):
            return str(value)
        # Interpolated values arrive as strings
        if value is None or not isinstance(value, str):
            return value
        if field_name in BOOL_FIELDS:
            lowered = value.strip().lower()
            if lowered in ("true", "yes", "on", "1"):
                return True
            if lowered in ("false", "no", "off", "0", ""):
                return False
            raise ValueError(f"expected a boolean, got '{value}'")
        if field_name in INT_FIELDS:
            try:
                return int(value)
            except ValueError:
                raise ValueError(f"expected an integer, got '{value}'")
        if field_name in FLOAT_FIELDS:
            try:
                return float(value)
            except ValueError:
                raise ValueError(f"expected a number of seconds, got '{value}'")
        return value
