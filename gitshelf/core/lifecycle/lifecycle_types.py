"""Lifecycle result types"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gitshelf.core.materializer import DownloadResult
from gitshelf.infrastructure.exceptions import DependencyInstallError, GitshelfError


class InstallStatus(str, Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DependencyInstallResult:
    """Outcome of the best-effort dependency step"""
    manifest: str
    command: str
    succeeded: bool
    error: Optional[DependencyInstallError] = None


@dataclass
class InstallResult:
    status: InstallStatus
    download: Optional[DownloadResult] = None
    dependencies: Optional[DependencyInstallResult] = None
    error: Optional[GitshelfError] = None

    @property
    def succeeded(self) -> bool:
        return self.status == InstallStatus.INSTALLED


@dataclass
class UpdateResult:
    """Outcome of uninstall followed by install"""
    uninstalled: bool
    install: Optional[InstallResult] = None
    error: Optional[GitshelfError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.install is not None and self.install.succeeded
