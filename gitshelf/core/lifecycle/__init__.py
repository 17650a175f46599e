"""Install, update, uninstall and start catalog entries"""
from .lifecycle_types import (
    DependencyInstallResult,
    InstallResult,
    InstallStatus,
    UpdateResult
)
from .dependency_installer import DependencyInstaller
from .process_launcher import ProcessLauncher, SubprocessLauncher
from .manager import LifecycleManager

__all__ = [
    'DependencyInstallResult',
    'InstallResult',
    'InstallStatus',
    'UpdateResult',
    'DependencyInstaller',
    'ProcessLauncher',
    'SubprocessLauncher',
    'LifecycleManager'
]
