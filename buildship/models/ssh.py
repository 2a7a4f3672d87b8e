"""
SSH Session Models

Connection parameters handed to the secure session manager.
"""

from dataclasses import dataclass, field
from typing import Optional

from buildship.models.credentials import KeyMaterial, KeyPath, Password


@dataclass(frozen=True)
class SessionParams:
    """Everything needed to open one authenticated session."""

    host: str
    username: str
    port: int = 22
    credentials: tuple = field(default=(), repr=False)
    passphrase: Optional[str] = field(default=None, repr=False)
    known_hosts: Optional[str] = None
    connect_timeout: Optional[float] = None
    transfer_timeout: Optional[float] = None
    command_timeout: Optional[float] = None

    @property
    def connection_string(self) -> str:
        """Get SSH connection string (user@host:port)."""
        return f"{self.username}@{self.host}:{self.port}"

    @property
    def password(self) -> Optional[str]:
        for credential in self.credentials:
            if isinstance(credential, Password):
                return credential.secret
        return None

    @property
    def keys(self) -> list:
        """Key credentials in the order they were configured."""
        return [c for c in self.credentials if isinstance(c, (KeyPath, KeyMaterial))]

    def __repr__(self) -> str:
        return f"SessionParams({self.connection_string})"
