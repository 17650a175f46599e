"""Keep the tool's own files in sync with an upstream copy"""
import hashlib
import os
import sys
from pathlib import Path
from typing import Callable, List, Optional

from gitshelf.infrastructure.exceptions import GitshelfError, SelfUpdateError
from gitshelf.infrastructure.filesystem import FileWriter, resolve_within
from gitshelf.infrastructure.http import HostingClient
from gitshelf.infrastructure.logging import get_logger

logger = get_logger(__name__)


def sha256_digest(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def restart_process() -> None:
    os.execv(sys.executable, [sys.executable] + sys.argv)


class SelfUpdater:
    """Compares local files to upstream by hash and replaces stale ones"""

    def __init__(
        self,
        client: HostingClient,
        base_url: str,
        files: List[str],
        local_root: Path,
        restart: Callable[[], None] = restart_process,
        writer: Optional[FileWriter] = None,
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.files = files
        self.local_root = Path(local_root)
        self.restart = restart
        self.writer = writer or FileWriter()

    def _local_digest(self, path: Path) -> Optional[str]:
        if not path.is_file():
            return None
        return sha256_digest(path.read_bytes())

    def check(self) -> List[str]:
        """
        Return the files whose local content differs from upstream

        Raises:
            SelfUpdateError: If an upstream file cannot be fetched
        """
        return [name for name, _ in self._stale_files()]

    def _stale_files(self):
        stale = []
        for name in self.files:
            url = f"{self.base_url}/{name.lstrip('/')}"
            try:
                upstream = self.client.get_url(url)
            except GitshelfError as e:
                raise SelfUpdateError(f"Cannot fetch {url}: {e}") from e

            local_path = resolve_within(self.local_root, name)
            if self._local_digest(local_path) != sha256_digest(upstream):
                stale.append((name, upstream))
        return stale

    def apply(self) -> List[str]:
        """
        Overwrite stale files and restart when anything changed

        Returns:
            Names of the files that were replaced (only reached when
            ``restart`` returns, as in tests)
        """
        updated = []
        for name, upstream in self._stale_files():
            try:
                self.writer.write_file(resolve_within(self.local_root, name), upstream)
            except GitshelfError as e:
                raise SelfUpdateError(f"Cannot update {name}: {e}") from e
            logger.info("self_update_file_replaced", file=name)
            updated.append(name)

        if updated:
            logger.info("self_update_restarting", files=updated)
            self.restart()
        return updated
