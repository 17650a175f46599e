"""Filesystem infrastructure module."""
from .directory_manager import DirectoryManager
from .file_writer import FileWriter, resolve_within

__all__ = [
    'DirectoryManager',
    'FileWriter',
    'resolve_within'
]
