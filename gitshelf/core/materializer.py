"""Reproduce a remote repository snapshot on local disk"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from gitshelf.core.catalog import CatalogEntry
from gitshelf.core.remote import FileFetcher, RemoteTreeResolver
from gitshelf.infrastructure.exceptions import (DownloadError, FilesystemError,
                                                GitshelfError)
from gitshelf.infrastructure.filesystem import resolve_within
from gitshelf.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ProgressSink(Protocol):
    """Receives download progress"""

    def start(self, total: int) -> None: ...

    def advance(self) -> None: ...

    def stop(self) -> None: ...


class NullProgress:
    """Progress sink that discards everything"""

    def start(self, total: int) -> None:
        pass

    def advance(self) -> None:
        pass

    def stop(self) -> None:
        pass


@dataclass
class DownloadResult:
    """Outcome of materializing one catalog entry"""
    succeeded: bool
    files_written: int
    total_files: int = 0
    error: Optional[GitshelfError] = None


class Materializer:
    """Fetches every file of an entry's repository into its folder"""

    def __init__(self, resolver: RemoteTreeResolver, fetcher: FileFetcher, install_root: Path):
        self.resolver = resolver
        self.fetcher = fetcher
        self.install_root = Path(install_root)

    def target_folder(self, entry: CatalogEntry) -> Path:
        return resolve_within(self.install_root, entry.folder)

    def materialize(self, entry: CatalogEntry, progress: Optional[ProgressSink] = None) -> DownloadResult:
        """
        Download the whole repository of ``entry``

        Files are fetched one at a time in listing order. The first failure
        stops the loop; files written before it stay on disk.

        Args:
            entry: Catalog entry to download
            progress: Sink told the total and advanced after each file

        Returns:
            DownloadResult with the number of files written and the error,
            if any
        """
        progress = progress or NullProgress()
        written = 0
        total = 0

        try:
            folder = self.target_folder(entry)
            files = self.resolver.list_files(entry.repo_id, entry.branch)
            total = len(files)
            try:
                # A repository without blobs still counts as installed
                folder.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError(f"Cannot create {folder}: {e}", path=folder) from e
            progress.start(total)
            try:
                for remote_file in files:
                    dest_path = resolve_within(folder, remote_file.path)
                    self.fetcher.fetch_file(entry.repo_id, entry.branch, remote_file.path, dest_path)
                    written += 1
                    progress.advance()
            finally:
                progress.stop()

        except (DownloadError, FilesystemError) as e:
            logger.error(
                "materialize_failed",
                entry=entry.name,
                files_written=written,
                total_files=total,
                error=str(e),
            )
            return DownloadResult(succeeded=False, files_written=written, total_files=total, error=e)

        logger.info("materialized", entry=entry.name, files_written=written)
        return DownloadResult(succeeded=True, files_written=written, total_files=total)
