"""
BuildShip Services Layer

Validation, packaging, SSH sessions and deployment.
"""

from .archive_service import ArchiveBuilder
from .config_service import ConfigService
from .deploy_service import DeployExecutor
from .ssh_service import RemoteSession, SecureSessionManager
from .validator import ConfigValidator

__all__ = [
    "ArchiveBuilder",
    "ConfigService",
    "ConfigValidator",
    "DeployExecutor",
    "RemoteSession",
    "SecureSessionManager",
]
