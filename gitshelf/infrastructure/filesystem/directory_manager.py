"""Directory operations management module."""
import shutil
from pathlib import Path
from typing import Callable, Optional

from gitshelf.infrastructure.exceptions import FilesystemError, RetryExhaustedError
from gitshelf.infrastructure.logging import get_logger
from gitshelf.infrastructure.retry import RetryPolicy

logger = get_logger(__name__)


class DirectoryManager:
    """Handles directory operations under the install root."""

    def __init__(
        self,
        remove_policy: RetryPolicy,
        rmtree: Optional[Callable[[Path], None]] = None,
    ):
        self.remove_policy = remove_policy
        self._rmtree = rmtree or shutil.rmtree

    def directory_exists(self, path: Path) -> bool:
        return Path(path).is_dir()

    def path_occupied(self, path: Path) -> bool:
        path = Path(path)
        return path.exists() or path.is_symlink()

    def remove_directory(self, path: Path) -> bool:
        """
        Recursively delete a directory, retrying transient failures

        Handles that are still closing can make deletion fail for a moment
        on some filesystems, hence the retries. A file or symlink found in
        place of the directory is unlinked.

        Args:
            path: Directory to delete

        Returns:
            False if there was nothing to delete, True otherwise

        Raises:
            FilesystemError: If every attempt failed. The directory may be
                left partially deleted.
        """
        path = Path(path)
        if not self.path_occupied(path):
            return False

        def attempt() -> None:
            # An earlier attempt may have finished the job before raising
            if path.is_symlink() or (path.exists() and not path.is_dir()):
                path.unlink()
            elif path.exists():
                self._rmtree(path)

        try:
            self.remove_policy.call(attempt, description=f"remove {path}")
        except RetryExhaustedError as e:
            logger.error(
                "directory_remove_failed",
                path=str(path),
                attempts=e.attempts,
                error=str(e.last_error),
            )
            raise FilesystemError(
                f"Failed to remove {path} after {e.attempts} attempts: {e.last_error}",
                path=path,
            ) from e

        logger.info("directory_removed", path=str(path))
        return True
