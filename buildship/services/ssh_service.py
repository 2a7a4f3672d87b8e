"""SSH session service for transferring archives and running remote commands."""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, TypeVar, Union

import asyncssh

from buildship.exceptions import (
    DeployTimeoutError,
    SSHConnectionError,
    SSHError,
    TransferError,
)
from buildship.logger import DeployLogger
from buildship.models.credentials import KeyMaterial, KeyPath
from buildship.models.results import CommandResult
from buildship.models.ssh import SessionParams

T = TypeVar("T")


async def with_deadline(awaitable: Awaitable[T], timeout: Optional[float], operation: str) -> T:
    """
    Await with an optional deadline.

    Raises:
        DeployTimeoutError: If the deadline expires first
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError:
        raise DeployTimeoutError(operation, timeout)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return value.rstrip()


class RemoteSession:
    """One live, authenticated connection. Only valid inside its session scope."""

    def __init__(self, connection, params: SessionParams, logger: DeployLogger):
        self._connection = connection
        self.params = params
        self.logger = logger

    @property
    def host(self) -> str:
        return self.params.host

    async def run(self, command: str) -> CommandResult:
        """
        Execute one shell command on the remote host.

        Args:
            command: Command string, run by the remote user's shell

        Returns:
            CommandResult with stdout, stderr and exit status

        Raises:
            DeployTimeoutError: If command_timeout expires
            SSHError: If the transport fails
        """
        self.logger.log_command(command)
        try:
            completed = await with_deadline(
                self._connection.run(command, check=False),
                self.params.command_timeout,
                f"Remote command '{command}'",
            )
        except (OSError, asyncssh.Error) as e:
            raise SSHError(
                f"Remote command '{command}' failed",
                context=f"Host: {self.host}, Error: {e}",
            ) from e

        result = CommandResult(
            command=command,
            stdout=_text(completed.stdout),
            stderr=_text(completed.stderr),
            exit_status=completed.exit_status,
        )
        self.logger.log_output(result.stdout, "stdout")
        self.logger.log_output(result.stderr, "stderr")
        return result

    async def put(self, local_path: Union[str, Path], remote_path: str) -> None:
        """
        Upload a local file over SFTP.

        Raises:
            DeployTimeoutError: If transfer_timeout expires
            TransferError: If the upload fails
        """
        local = str(Path(local_path).resolve())

        async def upload():
            async with self._connection.start_sftp_client() as sftp:
                await sftp.put(local, remote_path)

        self.logger.log(f"Uploading {local} to {remote_path}", local=local, remote=remote_path)
        try:
            await with_deadline(
                upload(),
                self.params.transfer_timeout,
                f"Upload of {local} to {remote_path}",
            )
        except (OSError, asyncssh.Error) as e:
            raise TransferError(local, remote_path, str(e)) from e


class SecureSessionManager:
    """Opens exactly one authenticated SSH connection per scope and always closes it."""

    def __init__(
        self,
        logger: Optional[DeployLogger] = None,
        connector: Optional[Callable[..., Awaitable[Any]]] = None,
    ):
        """
        Initialize session manager.

        Args:
            logger: Logger receiving connection lifecycle events
            connector: Coroutine function opening a connection (asyncssh.connect)
        """
        self.logger = logger or DeployLogger(quiet=True)
        self._connect = connector or asyncssh.connect

    def connect_options(self, params: SessionParams) -> Dict[str, Any]:
        """
        Build connection keyword arguments.

        Password and keys are passed together; the transport tries
        whichever the server accepts.
        """
        options: Dict[str, Any] = {
            "host": params.host,
            "port": params.port,
            "username": params.username,
            # None disables host key verification
            "known_hosts": params.known_hosts or None,
        }

        if params.password:
            options["password"] = params.password

        client_keys = []
        for key in params.keys:
            if isinstance(key, KeyPath):
                client_keys.append(str(key.path))
            elif isinstance(key, KeyMaterial):
                client_keys.append(asyncssh.import_private_key(key.text, params.passphrase))
        # None turns off public key auth instead of falling back to ~/.ssh keys
        options["client_keys"] = client_keys or None

        if params.passphrase:
            options["passphrase"] = params.passphrase

        return options

    async def _open(self, params: SessionParams):
        self.logger.log(f"Connecting to {params.connection_string}", host=params.host, port=params.port)
        try:
            options = self.connect_options(params)
            if params.connect_timeout is None:
                connection = await self._connect(**options)
            else:
                connection = await asyncio.wait_for(
                    self._connect(**options), params.connect_timeout
                )
        except asyncio.TimeoutError as e:
            raise SSHConnectionError(
                params.host, params.port, f"timed out after {params.connect_timeout:g}s"
            ) from e
        except (OSError, asyncssh.Error, ValueError) as e:
            raise SSHConnectionError(params.host, params.port, str(e)) from e

        self.logger.success(f"SSH connection established ({params.connection_string})")
        return connection

    @asynccontextmanager
    async def session(self, params: SessionParams) -> AsyncIterator[RemoteSession]:
        """
        Scoped session.

        The connection is closed on every exit path, including exceptions
        and cancellation inside the scope.

        Raises:
            SSHConnectionError: If connecting or authenticating fails
        """
        connection = await self._open(params)
        try:
            yield RemoteSession(connection, params, self.logger)
        finally:
            connection.close()
            await connection.wait_closed()
            self.logger.log("SSH connection closed", host=params.host)

    async def with_session(
        self, params: SessionParams, fn: Callable[[RemoteSession], Awaitable[T]]
    ) -> T:
        """Run fn with a fresh session and return its result."""
        async with self.session(params) as remote:
            return await fn(remote)
