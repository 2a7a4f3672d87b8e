"""
Result Models

Dataclass models for stage results and remote command outputs.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class PipelineState(Enum):
    """Lifecycle of a single pipeline run."""

    IDLE = "idle"
    VALIDATING = "validating"
    PACKAGING = "packaging"
    DEPLOYING = "deploying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def add_error(self, error: str) -> None:
        """Add an error to the validation result."""
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        """Add a warning to the validation result."""
        self.warnings.append(warning)

    def __repr__(self) -> str:
        return f"ValidationResult(valid={self.is_valid}, errors={len(self.errors)}, warnings={len(self.warnings)})"


@dataclass
class CommandResult:
    """Result of one remote command."""

    command: str
    stdout: str = ""
    stderr: str = ""
    exit_status: Optional[int] = None

    @property
    def has_warning(self) -> bool:
        """Non-empty stderr is reported as a warning, never as a failure."""
        return bool(self.stderr)

    @property
    def is_success(self) -> bool:
        return self.exit_status == 0

    def __repr__(self) -> str:
        return f"CommandResult(command='{self.command[:50]}', exit_status={self.exit_status})"


@dataclass(frozen=True)
class CommandWarning:
    """Diagnostic output from a remote command that did not abort the deploy."""

    command: str
    stderr: str

    def __str__(self) -> str:
        return f"{self.command}: {self.stderr.strip()}"


@dataclass(frozen=True)
class ArchiveResult:
    """Result of building the deploy archive."""

    path: Path
    size_bytes: int
    entry_count: int


@dataclass
class DeployResult:
    """Result of one deploy attempt."""

    remote_archive_path: str
    extraction: Optional[CommandResult] = None
    commands: list[CommandResult] = field(default_factory=list)
    warnings: list[CommandWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


@dataclass
class PipelineResult:
    """Outcome of a pipeline run."""

    state: PipelineState
    archive: Optional[ArchiveResult] = None
    deploy: Optional[DeployResult] = None

    @property
    def is_success(self) -> bool:
        return self.state == PipelineState.DONE
