"""Remote repository access"""
from .remote_types import RemoteFileEntry
from .tree_resolver import RemoteTreeResolver
from .file_fetcher import FileFetcher

__all__ = [
    'RemoteFileEntry',
    'RemoteTreeResolver',
    'FileFetcher'
]
