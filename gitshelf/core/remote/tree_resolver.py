"""Remote tree listing only"""
from typing import List

from gitshelf.infrastructure.http import HostingClient
from gitshelf.infrastructure.logging import get_logger

from .remote_types import RemoteFileEntry

logger = get_logger(__name__)


class RemoteTreeResolver:
    """Lists the files of a repository branch"""

    def __init__(self, client: HostingClient):
        self.client = client

    def list_files(self, repo_id: str, branch: str = "main") -> List[RemoteFileEntry]:
        """
        List every plain file of ``repo_id`` at ``branch``

        A single recursive tree request is made and directory or submodule
        nodes are dropped. There is no retry here.

        Args:
            repo_id: Repository identifier (owner/name)
            branch: Branch name

        Returns:
            Blob entries in listing order

        Raises:
            NotFoundError: If the repository or branch does not exist
            NetworkError: If the API is unreachable or returns an error
        """
        data = self.client.get_tree(repo_id, branch)
        if data.get("truncated"):
            logger.warning("tree_listing_truncated", repo=repo_id, branch=branch)

        nodes = [
            RemoteFileEntry(path=node["path"], type=node.get("type", ""), size=node.get("size"))
            for node in data["tree"]
            if node.get("path")
        ]
        files = [node for node in nodes if node.is_blob]
        logger.info("tree_listed", repo=repo_id, branch=branch, files=len(files))
        return files
