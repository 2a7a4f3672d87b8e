"""Run command - package the build output and deploy it"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import click

from buildship.base import BaseCommand
from buildship.models.config import StderrPolicy
from buildship.pipeline import PipelineController


@dataclass
class RunOptions:
    """Options for the run command."""

    source_dir: Optional[str] = None
    archive_name: Optional[str] = None
    no_deploy: bool = False
    stderr_policy: Optional[str] = None


class RunCommand(BaseCommand):
    """Validate, package and (optionally) deploy."""

    def __init__(self, options: RunOptions, **kwargs):
        super().__init__(**kwargs)
        self.options = options

    def execute(self) -> None:
        package, deploy = self.load_config(
            package_overrides={
                "source_dir": self.options.source_dir,
                "archive_name": self.options.archive_name,
            },
            deploy_overrides={
                "enabled": False if self.options.no_deploy else None,
                "stderr_policy": self.options.stderr_policy,
            },
        )

        details = {"Source": package.archive_path}
        if deploy.enabled:
            details["Target"] = f"{deploy.username}@{deploy.host}:{deploy.port}"
        self.show_header(title="Package & Deploy", details=details)

        logger = self.init_logger("run")
        controller = PipelineController(package, deploy, logger=logger)
        result = asyncio.run(controller.run())

        if self.json_output:
            self.output_json(
                {
                    "state": result.state.value,
                    "archive": str(result.archive.path) if result.archive else None,
                    "size_bytes": result.archive.size_bytes if result.archive else None,
                    "deployed": result.deploy is not None,
                    "warnings": [str(w) for w in result.deploy.warnings] if result.deploy else [],
                }
            )
            return

        self.console.print()
        if result.deploy is not None:
            self.print_success(f"Deployed to {deploy.host}")
        elif result.archive is not None:
            self.print_success(f"Packaged {result.archive.path}")
        else:
            self.print_success("Nothing to do (packaging disabled)")
        self._show_log_path()


@click.command("run")
@click.option("-c", "--config", "config_path", help="Config file (default: ./buildship.yml)")
@click.option("--source-dir", help="Build output directory to package")
@click.option("--archive-name", help="Archive file name inside the source directory")
@click.option("--no-deploy", is_flag=True, help="Only package, even if deploy is enabled")
@click.option(
    "--stderr-policy",
    type=click.Choice([policy.value for policy in StderrPolicy]),
    help="Treat remote stderr as a warning, or fail on non-zero exit status",
)
@click.option("--log-dir", help="Write a log file under this directory")
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def run(config_path, source_dir, archive_name, no_deploy, stderr_policy, log_dir, verbose, json_output):
    """
    Package the build output and deploy it

    Validates the configuration, writes the archive into the source
    directory, then uploads it, unzips it on the remote host and runs the
    configured commands in order.

    Examples:
        # Package and deploy with ./buildship.yml
        buildship run

        # Package only
        buildship run --no-deploy
    """
    options = RunOptions(
        source_dir=source_dir,
        archive_name=archive_name,
        no_deploy=no_deploy,
        stderr_policy=stderr_policy,
    )
    cmd = RunCommand(
        options,
        config_path=config_path,
        verbose=verbose,
        json_output=json_output,
        log_dir=log_dir,
    )
    cmd.run()
