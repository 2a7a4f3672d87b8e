"""
BuildShip Exception Hierarchy

Every fatal pipeline failure is a BuildShipError subclass.
"""

from typing import Optional


class BuildShipError(Exception):
    """Base exception for all BuildShip errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(BuildShipError):
    """Raised when package or deploy configuration is invalid."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        self.errors = list(errors or [])
        context = "\n".join(f"- {error}" for error in self.errors) or None
        super().__init__(message, context)


class ArchiveError(BuildShipError):
    """Raised when the build archive cannot be written."""

    pass


class DeployError(BuildShipError):
    """Raised when the deploy stage cannot run."""

    pass


class SSHError(DeployError):
    """Raised when a remote operation fails."""

    pass


class SSHConnectionError(SSHError):
    """Raised when connecting or authenticating to the remote host fails."""

    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        super().__init__(f"Could not connect to {host}:{port}", context=reason)


class TransferError(SSHError):
    """Raised when uploading the archive fails."""

    def __init__(self, local_path: str, remote_path: str, reason: str):
        self.local_path = local_path
        self.remote_path = remote_path
        super().__init__(
            f"Upload of {local_path} to {remote_path} failed", context=reason
        )


class DeployTimeoutError(SSHError):
    """Raised when a remote operation exceeds its deadline."""

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} timed out after {timeout:g}s")


class CommandFailedError(SSHError):
    """Raised when a remote command exits non-zero under the exit-status policy."""

    def __init__(self, command: str, exit_status: Optional[int], stderr: str = ""):
        self.command = command
        self.exit_status = exit_status
        self.stderr = stderr
        super().__init__(
            f"Remote command '{command}' exited with status {exit_status}",
            context=stderr.strip() or None,
        )
