"""Post-download dependency installation"""
import subprocess
from pathlib import Path
from typing import Callable, Dict, Optional

from gitshelf.infrastructure.exceptions import DependencyInstallError
from gitshelf.infrastructure.logging import get_logger

from .lifecycle_types import DependencyInstallResult

logger = get_logger(__name__)

OUTPUT_TAIL_CHARS = 2000


class DependencyInstaller:
    """Runs a package manager when a known manifest is present"""

    def __init__(
        self,
        installers: Dict[str, str],
        run: Optional[Callable[..., subprocess.CompletedProcess]] = None,
    ):
        """
        Args:
            installers: Manifest file name mapped to the shell command that installs it
            run: ``subprocess.run`` compatible callable
        """
        self.installers = installers
        self._run = run or subprocess.run

    def detect(self, folder: Path) -> Optional[str]:
        """Return the first manifest present in ``folder``"""
        for manifest in self.installers:
            if (Path(folder) / manifest).is_file():
                return manifest
        return None

    def install(self, folder: Path) -> Optional[DependencyInstallResult]:
        """
        Install dependencies of ``folder`` if it has a known manifest

        Output is captured, not echoed. Failures are returned and logged,
        never raised.

        Returns:
            None when no manifest was found
        """
        folder = Path(folder)
        manifest = self.detect(folder)
        if manifest is None:
            return None

        command = self.installers[manifest]
        logger.info("dependency_install_started", folder=str(folder), manifest=manifest, command=command)

        try:
            self._check(command, folder)
        except DependencyInstallError as e:
            logger.warning(
                "dependency_install_failed",
                folder=str(folder),
                command=command,
                returncode=e.returncode,
                output=e.output,
            )
            return DependencyInstallResult(manifest=manifest, command=command, succeeded=False, error=e)

        logger.info("dependency_install_complete", folder=str(folder), command=command)
        return DependencyInstallResult(manifest=manifest, command=command, succeeded=True)

    def _check(self, command: str, folder: Path) -> None:
        try:
            result = self._run(
                command,
                shell=True,
                cwd=str(folder),
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise DependencyInstallError(command, folder, output=str(e)) from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout or "")[-OUTPUT_TAIL_CHARS:]
            raise DependencyInstallError(command, folder, returncode=result.returncode, output=output)
