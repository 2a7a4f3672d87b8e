"""Pack command - build the archive without deploying"""

import asyncio

import click

from buildship.base import BaseCommand
from buildship.models.config import DeployConfig
from buildship.pipeline import PipelineController


class PackCommand(BaseCommand):
    """Package the build output only."""

    def __init__(self, source_dir=None, archive_name=None, **kwargs):
        super().__init__(**kwargs)
        self.source_dir = source_dir
        self.archive_name = archive_name

    def execute(self) -> None:
        package, _ = self.load_config(
            package_overrides={
                "enabled": True,
                "source_dir": self.source_dir,
                "archive_name": self.archive_name,
            }
        )
        self.show_header(title="Package", details={"Source": package.source_path})

        logger = self.init_logger("pack")
        result = asyncio.run(
            PipelineController(package, DeployConfig(enabled=False), logger=logger).run()
        )

        if self.json_output:
            self.output_json(
                {
                    "archive": str(result.archive.path),
                    "size_bytes": result.archive.size_bytes,
                    "entries": result.archive.entry_count,
                }
            )
            return

        self.print_success(
            f"{result.archive.path} ({result.archive.size_bytes} bytes, {result.archive.entry_count} entries)"
        )


@click.command("pack")
@click.option("-c", "--config", "config_path", help="Config file (default: ./buildship.yml)")
@click.option("--source-dir", help="Build output directory to package")
@click.option("--archive-name", help="Archive file name inside the source directory")
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def pack(config_path, source_dir, archive_name, verbose, json_output):
    """
    Build the archive without deploying

    Examples:
        buildship pack --source-dir build --archive-name site.zip
    """
    cmd = PackCommand(
        source_dir=source_dir,
        archive_name=archive_name,
        config_path=config_path,
        verbose=verbose,
        json_output=json_output,
    )
    cmd.run()
