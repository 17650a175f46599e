"""Catalog loading only"""
import json
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from gitshelf.infrastructure.exceptions import CatalogError
from gitshelf.infrastructure.logging import get_logger

from .models import CatalogEntry

logger = get_logger(__name__)


class CatalogStore:
    """Loads catalog entries from a JSON file"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> List[CatalogEntry]:
        """
        Read and validate the catalog

        The file holds a JSON array of objects with ``name``, ``repo``,
        ``folder`` and optional ``branch``, ``startFile``, ``startCommand``.
        It is read fresh on every call.

        Returns:
            Entries in file order

        Raises:
            CatalogError: If the file is missing, not valid JSON, has an
                invalid entry, or two entries share a folder
        """
        if not self.exists():
            raise CatalogError(f"{self.path.name} not found", path=self.path)

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise CatalogError(f"Cannot read {self.path}: {e}", path=self.path) from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"{self.path.name} is not valid JSON: {e}", path=self.path) from e

        if not isinstance(data, list):
            raise CatalogError(f"{self.path.name} must contain a JSON array", path=self.path)

        entries: List[CatalogEntry] = []
        for index, item in enumerate(data):
            try:
                entries.append(CatalogEntry.model_validate(item))
            except ValidationError as e:
                raise CatalogError(
                    f"Invalid catalog entry #{index + 1}: {_first_error(e)}", path=self.path
                ) from e

        self._check_unique_folders(entries)
        logger.debug("catalog_loaded", path=str(self.path), entries=len(entries))
        return entries

    def find(self, name: str) -> Optional[CatalogEntry]:
        """Find an entry by name (case-insensitive) or folder"""
        lowered = name.lower()
        for entry in self.load():
            if entry.name.lower() == lowered or entry.folder == name:
                return entry
        return None

    def _check_unique_folders(self, entries: List[CatalogEntry]) -> None:
        seen = {}
        for entry in entries:
            key = entry.folder.lower()
            if key in seen:
                raise CatalogError(
                    f"Entries '{seen[key]}' and '{entry.name}' share folder '{entry.folder}'",
                    path=self.path,
                )
            seen[key] = entry.name


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
