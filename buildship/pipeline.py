"""
Pipeline controller

Drives one run: validate -> package -> deploy, reporting each stage's outcome
to its observer. States move idle -> validating -> packaging -> (deploying)
-> done | failed, and every fatal error is re-raised to the caller after the
stage observer has seen it.
"""

import asyncio
from typing import Optional

from buildship.exceptions import (
    ArchiveError,
    BuildShipError,
    ConfigurationError,
    DeployError,
    SSHError,
)
from buildship.logger import DeployLogger
from buildship.models.config import DeployConfig, PackageConfig
from buildship.models.results import (
    ArchiveResult,
    DeployResult,
    PipelineResult,
    PipelineState,
)
from buildship.services.archive_service import ArchiveBuilder
from buildship.services.deploy_service import DeployExecutor
from buildship.services.ssh_service import RemoteSession, SecureSessionManager
from buildship.services.validator import ConfigValidator


class PipelineController:
    """Runs the package/deploy pipeline once."""

    def __init__(
        self,
        package: PackageConfig,
        deploy: DeployConfig,
        logger: Optional[DeployLogger] = None,
        validator: Optional[ConfigValidator] = None,
        archive_builder: Optional[ArchiveBuilder] = None,
        session_manager: Optional[SecureSessionManager] = None,
        executor: Optional[DeployExecutor] = None,
    ):
        self.package = package
        self.deploy = deploy
        self.logger = logger or DeployLogger()
        self.validator = validator or ConfigValidator()
        self.archive_builder = archive_builder or ArchiveBuilder(self.logger)
        self.session_manager = session_manager or SecureSessionManager(self.logger)
        self.executor = executor or DeployExecutor(
            self.logger, stderr_policy=deploy.stderr_policy
        )
        self.state = PipelineState.IDLE
        self.error: Optional[BuildShipError] = None

    def _transition(self, state: PipelineState) -> None:
        self.state = state
        self.logger.log(f"Pipeline state: {state.value}", "DEBUG", state=state.value)

    def _fail(self, error: BuildShipError) -> None:
        self.error = error
        self.logger.log_error(error.message, context=error.context)
        self._transition(PipelineState.FAILED)

    async def run(self) -> PipelineResult:
        """
        Execute the pipeline.

        Returns:
            PipelineResult in the DONE state

        Raises:
            ConfigurationError: Validation failed; nothing was written or sent
            ArchiveError: Packaging failed; deployment was not attempted
            DeployError: Any fatal deployment failure (SSHConnectionError,
                TransferError, DeployTimeoutError, CommandFailedError, ...)
        """
        if self.state != PipelineState.IDLE:
            raise RuntimeError("A PipelineController can only run once")

        self._validate()

        archive = await self._package()
        if archive is None or not self.deploy.enabled:
            self._transition(PipelineState.DONE)
            return PipelineResult(state=self.state, archive=archive)

        deploy_result = await self._deploy(archive)
        self._transition(PipelineState.DONE)
        return PipelineResult(state=self.state, archive=archive, deploy=deploy_result)

    def _validate(self) -> None:
        self._transition(PipelineState.VALIDATING)
        self.logger.step("Validating configuration")

        result = self.validator.validate(self.package, self.deploy)
        for warning in result.warnings:
            self.logger.warning(warning)

        if not result.is_valid:
            error = ConfigurationError("Invalid buildship configuration", result.errors)
            self._fail(error)
            self.package.notifier.on_error(error)
            self.deploy.notifier.on_error(error)
            raise error

        self.logger.success("Configuration valid")

    async def _package(self) -> Optional[ArchiveResult]:
        self._transition(PipelineState.PACKAGING)

        if not self.package.enabled:
            self.logger.log("Packaging is disabled, skipping archive step")
            if self.deploy.enabled:
                error = DeployError(
                    "Deployment is enabled but packaging is disabled",
                    context="Deployment skipped: it only ships an archive built in the same run",
                )
                self.logger.warning(error.message)
                self._fail(error)
                self.deploy.notifier.on_error(error)
                raise error
            self.package.notifier.on_success()
            return None

        self.logger.step("Packaging build output")
        try:
            archive = await self.archive_builder.build(
                self.package.source_dir, self.package.archive_name
            )
        except BuildShipError as e:
            self._fail(e)
            self.package.notifier.on_error(e)
            raise
        except Exception as e:
            error = ArchiveError("Packaging failed", context=f"{type(e).__name__}: {e}")
            self._fail(error)
            self.package.notifier.on_error(error)
            raise error from e

        self.package.notifier.on_success()
        return archive

    async def _deploy(self, archive: ArchiveResult) -> DeployResult:
        self._transition(PipelineState.DEPLOYING)
        self.logger.step(f"Deploying to {self.deploy.host}")

        async def deploy_over(session: RemoteSession) -> DeployResult:
            return await self.executor.deploy(
                session,
                archive.path,
                self.deploy.remote_archive_path,
                self.deploy.remote_extract_dir,
                self.deploy.commands,
            )

        try:
            result = await self.session_manager.with_session(
                self.deploy.session_params(), deploy_over
            )
        except BuildShipError as e:
            self._fail(e)
            self.deploy.notifier.on_error(e)
            raise
        except Exception as e:
            error = SSHError("Deployment failed", context=f"{type(e).__name__}: {e}")
            self._fail(error)
            self.deploy.notifier.on_error(error)
            raise error from e

        if result.has_warnings:
            self.logger.warning(
                f"Deployment finished with {len(result.warnings)} warning(s)",
                warnings=[str(w) for w in result.warnings],
            )
        self.logger.success("Upload and deployment completed")
        self.deploy.notifier.on_success()
        return result


def run_pipeline(
    package: PackageConfig,
    deploy: Optional[DeployConfig] = None,
    logger: Optional[DeployLogger] = None,
) -> PipelineResult:
    """Blocking entry point for build hooks that are not async."""
    controller = PipelineController(package, deploy or DeployConfig(), logger=logger)
    return asyncio.run(controller.run())
