"""Infrastructure layer for gitshelf."""
from .exceptions import (
    GitshelfError,
    CatalogError,
    DownloadError,
    NetworkError,
    NotFoundError,
    RetryExhaustedError,
    FilesystemError,
    DependencyInstallError,
    LifecycleError,
    NotInstalledError,
    StartFileNotFoundError,
    SelfUpdateError
)

__all__ = [
    'GitshelfError',
    'CatalogError',
    'DownloadError',
    'NetworkError',
    'NotFoundError',
    'RetryExhaustedError',
    'FilesystemError',
    'DependencyInstallError',
    'LifecycleError',
    'NotInstalledError',
    'StartFileNotFoundError',
    'SelfUpdateError'
]
