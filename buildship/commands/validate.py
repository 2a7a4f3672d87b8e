"""Validate command - check configuration without side effects"""

import click
from rich.table import Table

from buildship.base import BaseCommand
from buildship.services.validator import ConfigValidator


class ValidateCommand(BaseCommand):
    """Validate package and deploy configuration."""

    def execute(self) -> None:
        package, deploy = self.load_config()
        result = ConfigValidator().validate(package, deploy)

        if self.json_output:
            self.output_json(
                {
                    "valid": result.is_valid,
                    "errors": result.errors,
                    "warnings": result.warnings,
                },
                exit_code=0 if result.is_valid else 1,
            )
            return

        self.show_header(title="Validate Configuration")

        table = Table(show_header=True, header_style="bold")
        table.add_column("Stage")
        table.add_column("Enabled")
        table.add_column("Details")
        table.add_row(
            "package",
            "yes" if package.enabled else "no",
            str(package.archive_path),
        )
        table.add_row(
            "deploy",
            "yes" if deploy.enabled else "no",
            f"{deploy.username}@{deploy.host}:{deploy.port} ({len(deploy.commands or ())} commands)"
            if deploy.enabled
            else "-",
        )
        self.console.print(table)
        self.console.print()

        for warning in result.warnings:
            self.print_warning(warning)
        for error in result.errors:
            self.print_error(error)

        if not result.is_valid:
            raise SystemExit(1)
        self.print_success("Configuration is valid")


@click.command("validate")
@click.option("-c", "--config", "config_path", help="Config file (default: ./buildship.yml)")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def validate(config_path, json_output):
    """
    Check configuration without packaging or connecting

    Examples:
        buildship validate -c deploy/buildship.yml
    """
    cmd = ValidateCommand(config_path=config_path, json_output=json_output)
    cmd.run()
