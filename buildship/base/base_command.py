"""
Base Command Class

Abstract base for all BuildShip CLI commands.
Provides common functionality and structure.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from rich.console import Console

from buildship.exceptions import BuildShipError
from buildship.logger import DeployLogger
from buildship.models.config import DeployConfig, PackageConfig
from buildship.services.config_service import ConfigService
from buildship.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Config loading
    - Logger initialization
    - Header display
    - Error handling and exit codes
    - JSON output support
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        verbose: bool = False,
        json_output: bool = False,
        log_dir: Optional[str] = None,
    ):
        self.config_path = config_path
        self.verbose = verbose
        self.json_output = json_output
        self.log_dir = log_dir
        self.console = Console()
        self.logger: Optional[DeployLogger] = None

    def init_logger(self, command_name: str) -> DeployLogger:
        """
        Initialize command logger (console-silent in JSON mode).

        Args:
            command_name: Command name, used in the log file name
        """
        self.logger = DeployLogger(
            command_name,
            verbose=self.verbose,
            log_dir=self.log_dir,
            quiet=self.json_output,
            console=self.console,
        )
        return self.logger

    def load_config(
        self,
        package_overrides: Optional[Dict[str, Any]] = None,
        deploy_overrides: Optional[Dict[str, Any]] = None,
    ) -> Tuple[PackageConfig, DeployConfig]:
        """Load buildship.yml (or the --config file) with CLI overrides applied."""
        service = ConfigService(self.config_path)
        return service.load(package_overrides, deploy_overrides)

    def output_json(self, data: Dict[str, Any], exit_code: int = 0) -> None:
        """
        Output data as JSON and exit.

        Args:
            data: Data to output as JSON
            exit_code: Exit code (0 for success, non-zero for error)
        """
        print(json.dumps(data, indent=2, default=str))
        if exit_code != 0:
            raise SystemExit(exit_code)

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in JSON mode)."""
        if not self.json_output:
            show_header(
                title=title,
                subtitle=subtitle,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {message}[/green]")

    def print_error(self, message: str) -> None:
        """Print error message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[red]✗ {message}[/red]")

    def print_warning(self, message: str) -> None:
        """Print warning message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{message}[/dim]")

    def _show_log_path(self) -> None:
        if self.logger and self.logger.log_path and not self.json_output:
            self.console.print(f"[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            self._show_log_path()
            raise SystemExit(130)
        except SystemExit:
            raise
        except BuildShipError as e:
            if self.json_output:
                self.output_json(
                    {"error": e.message, "context": e.context, "type": type(e).__name__},
                    exit_code=1,
                )
            # Pipeline failures are already reported through the logger
            if not (self.logger and self.logger.has_errors):
                self.print_error(e.message)
                if e.context:
                    self.print_dim(e.context)
            self._show_log_path()
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {e}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            self._show_log_path()
            raise SystemExit(1)
        finally:
            if self.logger:
                self.logger.close()
