"""Exceptions raised by gitshelf."""
from pathlib import Path
from typing import Optional


class GitshelfError(Exception):
    """Base gitshelf error."""
    pass


class CatalogError(GitshelfError):
    """Catalog missing, unreadable or invalid."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class DownloadError(GitshelfError):
    """Base class for failures while downloading a repository."""
    pass


class NetworkError(DownloadError):
    """Hosting API unreachable or returned a non-success status."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class NotFoundError(DownloadError):
    """Repository, branch or file does not exist."""

    def __init__(self, resource: str, url: Optional[str] = None):
        super().__init__(f"Not found: {resource}")
        self.resource = resource
        self.url = url


class RetryExhaustedError(DownloadError):
    """An operation kept failing until its attempts ran out."""

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        message = f"Retry limit reached after {attempts} attempts"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class FilesystemError(GitshelfError):
    """Filesystem operation error."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class DependencyInstallError(GitshelfError):
    """Dependency install command failed. Never fatal to an install."""

    def __init__(self, command: str, folder: Path, returncode: Optional[int] = None, output: str = ""):
        reason = f"exit code {returncode}" if returncode is not None else "could not run"
        super().__init__(f"'{command}' failed in {folder} ({reason})")
        self.command = command
        self.folder = folder
        self.returncode = returncode
        self.output = output


class LifecycleError(GitshelfError):
    """Base class for lifecycle precondition failures."""
    pass


class NotInstalledError(LifecycleError):
    def __init__(self, name: str):
        super().__init__(f"{name} is not installed.")
        self.name = name


class StartFileNotFoundError(LifecycleError):
    def __init__(self, name: str, start_file: str):
        super().__init__(f"Start file {start_file} not found in {name}.")
        self.name = name
        self.start_file = start_file


class SelfUpdateError(GitshelfError):
    """Self-update check or apply failed."""
    pass
