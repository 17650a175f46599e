"""Single file download only"""
from pathlib import Path
from typing import Optional

from gitshelf.infrastructure.filesystem import FileWriter
from gitshelf.infrastructure.http import HostingClient
from gitshelf.infrastructure.logging import get_logger
from gitshelf.infrastructure.retry import RetryPolicy

logger = get_logger(__name__)


class FileFetcher:
    """Downloads one file and writes it locally, retrying failures"""

    def __init__(self, client: HostingClient, retry_policy: RetryPolicy, writer: Optional[FileWriter] = None):
        """
        Args:
            client: Hosting client used for raw content
            retry_policy: Attempts and fixed delay for each file
            writer: File writer, defaults to an atomic ``FileWriter``
        """
        self.client = client
        self.retry_policy = retry_policy
        self.writer = writer or FileWriter()

    def fetch_file(self, repo_id: str, branch: str, file_path: str, dest_path: Path) -> int:
        """
        Download ``file_path`` and write it to ``dest_path``

        Every attempt fetches then writes; any failure in either step is
        retried after the policy's delay. The destination only appears once
        the full content has been written.

        Returns:
            Number of bytes written

        Raises:
            RetryExhaustedError: If all attempts failed
        """

        def attempt() -> int:
            content = self.client.get_raw(repo_id, branch, file_path)
            return self.writer.write_file(dest_path, content)

        size = self.retry_policy.call(attempt, description=f"fetch {file_path}")
        logger.debug("file_fetched", path=file_path, bytes=size)
        return size
