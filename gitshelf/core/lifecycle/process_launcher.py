"""Fire-and-forget process launching"""
import subprocess
import sys
from pathlib import Path
from typing import Any, List, Protocol


class ProcessLauncher(Protocol):
    def launch(self, command: List[str], workdir: Path) -> Any:
        """Start ``command`` in ``workdir`` and return without waiting"""
        ...


class SubprocessLauncher:
    """Starts a detached child process"""

    def launch(self, command: List[str], workdir: Path) -> subprocess.Popen:
        kwargs = {}
        if sys.platform == "win32":
            kwargs["creationflags"] = subprocess.CREATE_NEW_CONSOLE
        else:
            kwargs["start_new_session"] = True

        return subprocess.Popen(command, cwd=str(workdir), **kwargs)
