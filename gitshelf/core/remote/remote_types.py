"""Remote tree type definitions"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RemoteFileEntry:
    """One node of a repository tree listing"""
    path: str
    type: str  # 'blob', 'tree' or 'commit'
    size: Optional[int] = None

    @property
    def is_blob(self) -> bool:
        return self.type == "blob"
