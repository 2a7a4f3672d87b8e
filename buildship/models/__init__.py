"""
BuildShip Domain Models

Dataclass-based models for configuration, credentials and results.
"""

from .config import (
    PackageConfig,
    DeployConfig,
    StderrPolicy,
)
from .credentials import (
    Credential,
    Password,
    KeyPath,
    KeyMaterial,
    InvalidKey,
    is_private_key_content,
    resolve_credentials,
)
from .observers import (
    StageObserver,
    CallbackObserver,
    NullObserver,
)
from .results import (
    PipelineState,
    PipelineResult,
    ValidationResult,
    ArchiveResult,
    CommandResult,
    CommandWarning,
    DeployResult,
)
from .ssh import SessionParams

__all__ = [
    # Config
    "PackageConfig",
    "DeployConfig",
    "StderrPolicy",
    # Credentials
    "Credential",
    "Password",
    "KeyPath",
    "KeyMaterial",
    "InvalidKey",
    "is_private_key_content",
    "resolve_credentials",
    # Observers
    "StageObserver",
    "CallbackObserver",
    "NullObserver",
    # Results
    "PipelineState",
    "PipelineResult",
    "ValidationResult",
    "ArchiveResult",
    "CommandResult",
    "CommandWarning",
    "DeployResult",
    # SSH
    "SessionParams",
]
