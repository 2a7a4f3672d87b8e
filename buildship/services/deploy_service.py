"""Deploy service: upload, remote extraction and user commands."""

import shlex
from pathlib import Path
from typing import Optional, Sequence, Union

from buildship.constants import REMOTE_EXTRACT_COMMAND
from buildship.exceptions import CommandFailedError
from buildship.logger import DeployLogger
from buildship.models.config import StderrPolicy
from buildship.models.results import CommandResult, CommandWarning, DeployResult
from buildship.services.ssh_service import RemoteSession


def build_extract_command(remote_archive_path: str, remote_extract_dir: str) -> str:
    """unzip command that overwrites existing files in the target directory."""
    return REMOTE_EXTRACT_COMMAND.format(
        archive=shlex.quote(remote_archive_path),
        target=shlex.quote(remote_extract_dir),
    )


class DeployExecutor:
    """
    Runs one deploy attempt over an open session, strictly in order:
    upload, extract, then each user command.

    There is no rollback: commands that already ran stay applied when a
    later step fails.
    """

    def __init__(
        self,
        logger: Optional[DeployLogger] = None,
        stderr_policy: StderrPolicy = StderrPolicy.WARN,
    ):
        """
        Initialize deploy executor.

        Args:
            logger: Logger receiving step and warning events
            stderr_policy: WARN treats stderr as a warning only; EXIT_STATUS
                also fails the deploy on a non-zero exit status
        """
        self.logger = logger or DeployLogger(quiet=True)
        self.stderr_policy = stderr_policy

    async def deploy(
        self,
        session: RemoteSession,
        local_archive_path: Union[str, Path],
        remote_archive_path: str,
        remote_extract_dir: Optional[str],
        commands: Sequence[str] = (),
    ) -> DeployResult:
        """
        Upload the archive, extract it and run the deploy commands.

        Returns:
            DeployResult with every command result and collected warnings

        Raises:
            TransferError: If the upload fails
            SSHError: If the transport fails during a command
            DeployTimeoutError: If an operation exceeds its deadline
            CommandFailedError: Non-zero exit under the EXIT_STATUS policy
        """
        result = DeployResult(remote_archive_path=remote_archive_path)

        await session.put(local_archive_path, remote_archive_path)
        self.logger.success(f"Uploaded archive to {remote_archive_path}")

        if remote_extract_dir:
            self.logger.log(f"Extracting archive to {remote_extract_dir}")
            extract_command = build_extract_command(remote_archive_path, remote_extract_dir)
            result.extraction = await self._execute(session, extract_command, result)
            if not result.extraction.has_warning:
                self.logger.success(f"Extracted archive to {remote_extract_dir}")

        for command in commands:
            command_result = await self._execute(session, command, result)
            result.commands.append(command_result)
            if not command_result.has_warning:
                self.logger.success(
                    f"Command '{command}' completed",
                    command=command,
                    stdout=command_result.stdout,
                )

        return result

    async def _execute(
        self, session: RemoteSession, command: str, result: DeployResult
    ) -> CommandResult:
        self.logger.log(f"Running remote command: {command}", command=command)
        command_result = await session.run(command)

        # exit_status is None when the remote process died from a signal
        if self.stderr_policy == StderrPolicy.EXIT_STATUS and not command_result.is_success:
            raise CommandFailedError(command, command_result.exit_status, command_result.stderr)

        if command_result.has_warning:
            warning = CommandWarning(command=command, stderr=command_result.stderr)
            result.warnings.append(warning)
            self.logger.warning(
                f"Command '{command}' wrote to stderr: {command_result.stderr}",
                command=command,
                stderr=command_result.stderr,
            )

        return command_result
