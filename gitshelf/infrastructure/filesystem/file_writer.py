"""File writing operations module."""
import os
import tempfile
from pathlib import Path

from gitshelf.infrastructure.exceptions import FilesystemError


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


def resolve_within(base_path: Path, relative: str) -> Path:
    """
    Join ``relative`` onto ``base_path`` and refuse results outside it.

    Raises:
        FilesystemError: If the path resolves outside ``base_path``
    """
    base = Path(base_path).resolve()
    resolved = (base / relative).resolve()
    try:
        resolved.relative_to(base)
    except ValueError:
        raise FilesystemError(
            f"Path '{relative}' resolves outside {base}", path=resolved
        )
    if resolved == base:
        raise FilesystemError(f"Path '{relative}' does not name a file", path=resolved)
    return resolved


class FileWriter:
    """Handles file writing operations only."""

    def write_file(self, path: Path, content: bytes) -> int:
        """
        Write content to a temporary sibling and rename it into place

        A failed write never leaves ``path`` behind, and readers never see a
        file shorter than its final size.

        Args:
            path: Destination file
            content: Full file content

        Returns:
            Number of bytes written

        Raises:
            FilesystemError: If the directory chain or file cannot be written
        """
        path = Path(path)
        tmp_path = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            with tempfile.NamedTemporaryFile(
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".part",
                delete=False,
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
                tmp_file.write(content)

            # Temporary files are created 0600; match a plain open() instead
            os.chmod(tmp_path, 0o666 & ~_current_umask())

            os.replace(tmp_path, path)
            return len(content)

        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            if isinstance(e, PermissionError):
                raise FilesystemError(f"Permission denied: {path}", path=path) from e
            raise FilesystemError(f"Failed to write file {path}: {e}", path=path) from e
