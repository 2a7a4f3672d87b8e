"""Pipeline configuration validation service."""

from collections.abc import Sequence
from typing import List

from buildship.models.config import DeployConfig, PackageConfig, StderrPolicy
from buildship.models.credentials import InvalidKey
from buildship.models.results import ValidationResult


class ConfigValidator:
    """
    Validates package and deploy configuration before any I/O.

    Checks only; never touches the network and never writes to disk.
    """

    def validate(self, package: PackageConfig, deploy: DeployConfig) -> ValidationResult:
        """
        Validate both stage configurations together.

        Returns:
            ValidationResult (no errors means the pipeline may start)
        """
        result = ValidationResult()

        if deploy.enabled and not package.enabled:
            result.add_error("Deployment is enabled but packaging is disabled (deploy requires package)")

        if package.enabled:
            for error in self._validate_package(package):
                result.add_error(error)

        if deploy.enabled:
            for error in self._validate_presence(deploy):
                result.add_error(error)
            for error in self._validate_credentials(deploy):
                result.add_error(error)
            for error in self._validate_shape(deploy):
                result.add_error(error)
            self._check_host_keys(deploy, result)

        return result

    def _validate_package(self, package: PackageConfig) -> List[str]:
        """Validate archive naming."""
        errors = []

        name = package.archive_name
        if not name or not str(name).strip():
            errors.append("Archive name (archive_name) is required")
        elif "/" in name or "\\" in name or name in (".", ".."):
            errors.append(f"Archive name must be a plain file name: {name}")

        if not str(package.source_dir).strip():
            errors.append("Source directory (source_dir) is required")

        return errors

    def _validate_presence(self, deploy: DeployConfig) -> List[str]:
        """Validate required connection and remote path fields."""
        errors = []

        if not deploy.host:
            errors.append("Deployment requires an SSH host (host)")
        if not deploy.port:
            errors.append("Deployment requires an SSH port (port)")
        elif not isinstance(deploy.port, int) or not 0 < deploy.port < 65536:
            errors.append(f"SSH port must be between 1 and 65535: {deploy.port}")
        if not deploy.username:
            errors.append("Deployment requires an SSH username (username)")
        if not deploy.remote_archive_path:
            errors.append("Deployment requires a remote archive path (remote_archive_path)")
        if not deploy.remote_extract_dir:
            errors.append("Deployment requires a remote extraction directory (remote_extract_dir)")

        return errors

    def _validate_credentials(self, deploy: DeployConfig) -> List[str]:
        """Validate that a usable password or private key is present."""
        errors = []

        if not deploy.credentials:
            errors.append("Deployment requires an SSH password (password) or private key (private_key)")

        if deploy.password is not None and not isinstance(deploy.password, str):
            errors.append("SSH password (password) must be a string")

        for credential in deploy.credentials:
            if isinstance(credential, InvalidKey):
                errors.append(
                    "SSH private key is neither an existing file nor valid key content"
                )

        return errors

    def _validate_shape(self, deploy: DeployConfig) -> List[str]:
        """Validate command list and policy values."""
        errors = []

        commands = deploy.commands
        if commands is not None:
            if isinstance(commands, (str, bytes)) or not isinstance(commands, Sequence):
                errors.append("Deploy commands (commands) must be a list of strings")
            elif not all(isinstance(command, str) for command in commands):
                errors.append("Deploy commands (commands) must be a list of strings")

        if not isinstance(deploy.stderr_policy, StderrPolicy):
            choices = ", ".join(policy.value for policy in StderrPolicy)
            errors.append(
                f"Unknown stderr policy: {deploy.stderr_policy} (expected one of: {choices})"
            )

        for name in ("connect_timeout", "transfer_timeout", "command_timeout"):
            value = getattr(deploy, name)
            if value is not None and (not isinstance(value, (int, float)) or value <= 0):
                errors.append(f"{name} must be a positive number of seconds: {value}")

        return errors

    def _check_host_keys(self, deploy: DeployConfig, result: ValidationResult) -> None:
        """Warn when host key verification is off."""
        if not deploy.known_hosts:
            result.add_warning(
                f"Host key checking is disabled for {deploy.host} (set known_hosts to enable it)"
            )
