"""
Logging system for BuildShip
Records structured events, writes optional log files, keeps console output clean
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

from rich.console import Console
from rich.markup import escape

from buildship.constants import LOG_DATE_FORMAT, LOG_TIME_FORMAT

_default_console = Console()

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


@dataclass(frozen=True)
class LogEvent:
    """One structured log record."""

    level: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


class DeployLogger:
    """
    Manages logging for pipeline runs
    - Keeps every record as a LogEvent so callers can inspect what happened
    - Writes all output to a log file in real-time (when log_dir is set)
    - Shows clean progress UI in console (unless quiet)
    """

    def __init__(
        self,
        operation: str = "run",
        verbose: bool = False,
        log_dir: Optional[Union[str, Path]] = None,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        """
        Initialize logger

        Args:
            operation: Operation name (e.g., 'run', 'pack')
            verbose: If True, show every record in console
            log_dir: Directory for log files; no file is written when None
            quiet: If True, never write to console
            console: Rich console to print to (module console by default)
        """
        self.operation = operation
        self.verbose = verbose
        self.quiet = quiet
        self.console = console or _default_console
        self.events: List[LogEvent] = []
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.current_step = ""
        self.has_errors = False

        if log_dir is not None:
            # Structure: {log_dir}/{date}/{time}_{operation}.log
            now = datetime.now()
            day_dir = Path(log_dir) / now.strftime(LOG_DATE_FORMAT)
            day_dir.mkdir(parents=True, exist_ok=True)
            self.log_path = day_dir / f"{now.strftime(LOG_TIME_FORMAT)}_{operation}.log"
            self.log_file = open(self.log_path, "w", buffering=1)
            self._write_log_header()

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
BuildShip Log
{"=" * 80}
Operation: {self.operation}
Started: {datetime.now().isoformat()}
{"=" * 80}

"""
        self.log_file.write(header)
        self.log_file.flush()

    def _print(self, markup: str):
        if not self.quiet:
            self.console.print(markup)

    def _record(self, level: str, message: str, data: Optional[Dict[str, Any]] = None):
        self.events.append(LogEvent(level=level, message=message, data=dict(data or {})))

        if self.log_file:
            timestamp = datetime.now().strftime("%H:%M:%S")
            self.log_file.write(f"[{timestamp}] [{level}] {message}\n")
            self.log_file.flush()

    def log(self, message: str, level: str = "INFO", **data):
        """
        Log a message to events, file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
            **data: Structured fields attached to the event
        """
        self._record(level, message, data)

        if self.verbose:
            text = escape(message)
            if level == "ERROR":
                self._print(f"[red]{text}[/red]")
            elif level == "WARNING":
                self._print(f"[yellow]{text}[/yellow]")
            elif level == "DEBUG":
                self._print(f"[dim]{text}[/dim]")
            else:
                self._print(text)

    def log_command(self, command: str):
        """Log a command being executed"""
        self.log(f"Executing: {command}", "DEBUG", command=command)

    def log_output(self, output: str, stream: str = "stdout"):
        """
        Log command output

        Always recorded, shown in console only when verbose.

        Args:
            output: Command output (single line or multiline)
            stream: Stream name (stdout, stderr)
        """
        if not output:
            return

        clean_output = ANSI_ESCAPE.sub("", output)
        self.events.append(
            LogEvent(level="OUTPUT", message=clean_output, data={"stream": stream})
        )

        if self.log_file:
            for line in clean_output.splitlines():
                self.log_file.write(f"  [{stream}] {line}\n")
            self.log_file.flush()

        if self.verbose:
            self._print(f"[dim]{escape(clean_output)}[/dim]")

    def log_error(self, error: str, context: Optional[str] = None, **data):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., command that failed)
        """
        self.has_errors = True
        if context:
            data["context"] = context
        self.events.append(LogEvent(level="ERROR", message=error, data=data))

        if self.log_file:
            error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
            if context:
                error_block += f"\nContext: {context}\n"
            error_block += f"{'!' * 80}\n\n"
            self.log_file.write(error_block)
            self.log_file.flush()

        self._print(f"[bold red]✗ {escape(error)}[/bold red]")
        if context:
            self._print(f"  [color(208)]{escape(context)}[/color(208)]")

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        self.current_step = step_name
        self._record("STEP", step_name)

        if not self.verbose:
            self._print(f"[color(214)]▶[/color(214)] [white]{escape(step_name)}[/white]")
        else:
            self._print(f"[bold]{escape(step_name)}[/bold]")

    def success(self, message: str, **data):
        """Log a success message"""
        self._record("SUCCESS", message, data)
        self._print(f"  [dim]✓ {escape(message)}[/dim]")

    def warning(self, message: str, **data):
        """Log a warning message"""
        self._record("WARNING", message, data)
        self._print(f"  [yellow]⚠[/yellow] [dim]{escape(message)}[/dim]")

    def events_for(self, level: str) -> List[LogEvent]:
        """Events recorded at the given level."""
        return [event for event in self.events if event.level == level]

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        """Context manager exit"""
        if exc_type is not None and exc_type != SystemExit and not self.has_errors:
            self.log_error(
                str(exc_val) if exc_val else "Operation failed",
                context=f"{exc_type.__name__}",
            )
        self.close()
        return False  # Don't suppress exceptions
