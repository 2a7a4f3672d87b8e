#!/usr/bin/env python3
"""BuildShip CLI - Main entry point"""

import functools
import sys

import rich_click as click
from click.exceptions import ClickException
from rich.console import Console

from buildship import __version__
from buildship.commands import pack, run, validate

# Configure rich-click help output
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.MAX_WIDTH = 100

click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_METAVAR = "bold yellow"
click.rich_click.STYLE_OPTION_DEFAULT = "dim cyan"
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"
click.rich_click.STYLE_COMMANDS_PANEL_BORDER = "cyan"

console = Console()


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(130)

    return wrapper


@click.group()
@click.version_option(version=__version__, prog_name="buildship")
def cli() -> None:
    """
    BuildShip - package a build directory and deploy it over SSH.

    \b
    Quick Start:
      buildship validate          # Check buildship.yml
      buildship pack              # Write dist/build.zip
      buildship run               # Package, upload, unzip, run commands
    """


cli.add_command(run.run)
cli.add_command(pack.pack)
cli.add_command(validate.validate)


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    cli()


if __name__ == "__main__":
    main()
