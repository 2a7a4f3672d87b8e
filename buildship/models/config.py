"""
Pipeline Configuration Models

Frozen dataclasses for the packaging and deployment stages. Both are built
once per run and never mutated afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union

from buildship.constants import (
    DEFAULT_ARCHIVE_NAME,
    DEFAULT_SOURCE_DIR,
    DEFAULT_SSH_PORT,
    SSH_COMMAND_TIMEOUT,
    SSH_CONNECTION_TIMEOUT,
    SSH_TRANSFER_TIMEOUT,
)
from buildship.models.credentials import resolve_credentials
from buildship.models.observers import CallbackObserver, StageObserver
from buildship.models.ssh import SessionParams


class StderrPolicy(Enum):
    """How remote command output decides failure."""

    WARN = "warn"
    EXIT_STATUS = "exit-status"


def _stage_observer(
    observer: Optional[StageObserver],
    on_success: Optional[Callable[[], None]],
    on_error: Optional[Callable[[Exception], None]],
) -> StageObserver:
    if observer is not None:
        return observer
    return CallbackObserver(on_success=on_success, on_error=on_error)


@dataclass(frozen=True)
class PackageConfig:
    """Packaging stage configuration."""

    enabled: bool = True
    source_dir: Union[str, Path] = DEFAULT_SOURCE_DIR
    archive_name: str = DEFAULT_ARCHIVE_NAME
    on_success: Optional[Callable[[], None]] = field(default=None, repr=False)
    on_error: Optional[Callable[[Exception], None]] = field(default=None, repr=False)
    observer: Optional[StageObserver] = field(default=None, repr=False)

    @property
    def notifier(self) -> StageObserver:
        """Observer receiving this stage's outcome."""
        return _stage_observer(self.observer, self.on_success, self.on_error)

    @property
    def source_path(self) -> Path:
        return Path(self.source_dir)

    @property
    def archive_path(self) -> Path:
        """Where the archive is written (inside the source directory)."""
        return self.source_path / self.archive_name


@dataclass(frozen=True)
class DeployConfig:
    """Deployment stage configuration."""

    enabled: bool = False
    host: str = ""
    port: Optional[int] = DEFAULT_SSH_PORT
    username: str = ""
    password: Optional[str] = field(default=None, repr=False)
    private_key: Optional[Union[str, Path]] = field(default=None, repr=False)
    passphrase: Optional[str] = field(default=None, repr=False)
    remote_archive_path: str = ""
    remote_extract_dir: str = ""
    commands: Sequence[str] = ()
    known_hosts: Optional[str] = None
    connect_timeout: Optional[float] = SSH_CONNECTION_TIMEOUT
    transfer_timeout: Optional[float] = SSH_TRANSFER_TIMEOUT
    command_timeout: Optional[float] = SSH_COMMAND_TIMEOUT
    stderr_policy: Any = StderrPolicy.WARN
    on_success: Optional[Callable[[], None]] = field(default=None, repr=False)
    on_error: Optional[Callable[[Exception], None]] = field(default=None, repr=False)
    observer: Optional[StageObserver] = field(default=None, repr=False)
    credentials: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Lists are frozen to tuples and an empty YAML key means no commands;
        # anything else is left for the validator
        if self.commands is None:
            object.__setattr__(self, "commands", ())
        elif isinstance(self.commands, list):
            object.__setattr__(self, "commands", tuple(self.commands))
        if isinstance(self.stderr_policy, str):
            try:
                object.__setattr__(self, "stderr_policy", StderrPolicy(self.stderr_policy))
            except ValueError:
                pass
        object.__setattr__(
            self, "credentials", resolve_credentials(self.password, self.private_key)
        )

    @property
    def notifier(self) -> StageObserver:
        """Observer receiving this stage's outcome."""
        return _stage_observer(self.observer, self.on_success, self.on_error)

    def session_params(self) -> SessionParams:
        """Connection parameters for the secure session manager."""
        return SessionParams(
            host=self.host,
            port=self.port or DEFAULT_SSH_PORT,
            username=self.username,
            credentials=self.credentials,
            passphrase=self.passphrase,
            known_hosts=self.known_hosts,
            connect_timeout=self.connect_timeout,
            transfer_timeout=self.transfer_timeout,
            command_timeout=self.command_timeout,
        )
