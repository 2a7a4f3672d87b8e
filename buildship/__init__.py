"""
BuildShip - package a build directory and ship it to a server over SSH
"""

__version__ = "1.0.0"

from buildship.exceptions import (
    BuildShipError,
    ConfigurationError,
    ArchiveError,
    DeployError,
    SSHError,
    SSHConnectionError,
    TransferError,
    DeployTimeoutError,
    CommandFailedError,
)
from buildship.models import (
    PackageConfig,
    DeployConfig,
    StderrPolicy,
    StageObserver,
    PipelineState,
    PipelineResult,
)
from buildship.pipeline import PipelineController, run_pipeline

__all__ = [
    "__version__",
    "BuildShipError",
    "ConfigurationError",
    "ArchiveError",
    "DeployError",
    "SSHError",
    "SSHConnectionError",
    "TransferError",
    "DeployTimeoutError",
    "CommandFailedError",
    "PackageConfig",
    "DeployConfig",
    "StderrPolicy",
    "StageObserver",
    "PipelineState",
    "PipelineResult",
    "PipelineController",
    "run_pipeline",
]
