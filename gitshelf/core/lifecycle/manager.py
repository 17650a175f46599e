"""Lifecycle of a catalog entry: Absent <-> Installed"""
import shlex
import time
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

from gitshelf.config import Settings
from gitshelf.core.catalog import CatalogEntry
from gitshelf.core.materializer import Materializer, ProgressSink
from gitshelf.core.remote import FileFetcher, RemoteTreeResolver
from gitshelf.infrastructure.exceptions import (FilesystemError, NotInstalledError,
                                                StartFileNotFoundError)
from gitshelf.infrastructure.filesystem import DirectoryManager, FileWriter, resolve_within
from gitshelf.infrastructure.http import HostingClient
from gitshelf.infrastructure.logging import bind_context, get_logger, unbind_context
from gitshelf.infrastructure.retry import RetryPolicy

from .dependency_installer import DependencyInstaller
from .lifecycle_types import InstallResult, InstallStatus, UpdateResult
from .process_launcher import ProcessLauncher, SubprocessLauncher

logger = get_logger(__name__)

ConfirmOverwrite = Callable[[CatalogEntry], bool]


class LifecycleManager:
    """
    Install, update, uninstall and start catalog entries.

    An entry is installed exactly when ``<install_root>/<folder>`` exists.
    Operations run one at a time; nothing here locks the install root.
    """

    def __init__(
        self,
        install_root: Path,
        materializer: Materializer,
        directories: DirectoryManager,
        dependencies: DependencyInstaller,
        launcher: ProcessLauncher,
        start_interpreter: str = "node",
        default_start_file: str = "index.js",
    ):
        self.install_root = Path(install_root)
        self.materializer = materializer
        self.directories = directories
        self.dependencies = dependencies
        self.launcher = launcher
        self.start_interpreter = start_interpreter
        self.default_start_file = default_start_file

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: HostingClient,
        launcher: Optional[ProcessLauncher] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "LifecycleManager":
        """Wire the default collaborators from settings"""
        install_root = settings.resolved_install_root
        fetch_policy = RetryPolicy(settings.fetch_attempts, settings.fetch_retry_delay, sleep=sleep)
        remove_policy = RetryPolicy(
            settings.remove_attempts, settings.remove_retry_delay, retry_on=(OSError,), sleep=sleep
        )
        materializer = Materializer(
            RemoteTreeResolver(client),
            FileFetcher(client, fetch_policy, FileWriter()),
            install_root,
        )
        return cls(
            install_root=install_root,
            materializer=materializer,
            directories=DirectoryManager(remove_policy),
            dependencies=DependencyInstaller(settings.dependency_installers),
            launcher=launcher or SubprocessLauncher(),
            start_interpreter=settings.start_interpreter,
            default_start_file=settings.default_start_file,
        )

    def folder_for(self, entry: CatalogEntry) -> Path:
        return resolve_within(self.install_root, entry.folder)

    def is_installed(self, entry: CatalogEntry) -> bool:
        return self.directories.directory_exists(self.folder_for(entry))

    def installed_entries(self, entries: Iterable[CatalogEntry]) -> List[CatalogEntry]:
        return [entry for entry in entries if self.is_installed(entry)]

    def install(
        self,
        entry: CatalogEntry,
        confirm_overwrite: Optional[ConfirmOverwrite] = None,
        progress: Optional[ProgressSink] = None,
    ) -> InstallResult:
        """
        Download ``entry`` and install its dependencies

        An existing folder is only replaced when ``confirm_overwrite`` agrees;
        otherwise it is left untouched and the install is skipped. A failed
        dependency step does not undo the download.

        Args:
            entry: Entry to install
            confirm_overwrite: Asked whether to replace an existing folder
            progress: Download progress sink

        Returns:
            InstallResult
        """
        bind_context(operation="install", entry=entry.name, repo=entry.repo_id, branch=entry.branch)
        try:
            folder = self.folder_for(entry)

            if self.directories.path_occupied(folder):
                if confirm_overwrite is None or not confirm_overwrite(entry):
                    logger.info("install_skipped", folder=str(folder))
                    return InstallResult(status=InstallStatus.SKIPPED)
                try:
                    self.directories.remove_directory(folder)
                except FilesystemError as e:
                    return InstallResult(status=InstallStatus.FAILED, error=e)

            download = self.materializer.materialize(entry, progress)
            if not download.succeeded:
                return InstallResult(status=InstallStatus.FAILED, download=download, error=download.error)

            dependencies = self.dependencies.install(folder)
            logger.info("installed", folder=str(folder), files=download.files_written)
            return InstallResult(status=InstallStatus.INSTALLED, download=download, dependencies=dependencies)
        finally:
            unbind_context("operation", "entry", "repo", "branch")

    def uninstall(self, entry: CatalogEntry) -> bool:
        """
        Delete the folder of ``entry``

        Returns:
            False when the entry was not installed

        Raises:
            FilesystemError: If deletion kept failing
        """
        bind_context(operation="uninstall", entry=entry.name)
        try:
            removed = self.directories.remove_directory(self.folder_for(entry))
            if not removed:
                logger.info("uninstall_nothing_to_do")
            return removed
        finally:
            unbind_context("operation", "entry")

    def update(
        self,
        entry: CatalogEntry,
        progress: Optional[ProgressSink] = None,
    ) -> UpdateResult:
        """
        Uninstall then install ``entry``

        Not transactional: when the install fails after the uninstall
        succeeded, the entry ends up not installed.
        """
        try:
            uninstalled = self.uninstall(entry)
        except FilesystemError as e:
            return UpdateResult(uninstalled=False, error=e)

        install = self.install(entry, confirm_overwrite=lambda _: True, progress=progress)
        if not install.succeeded:
            logger.warning("update_left_uninstalled", entry=entry.name, error=str(install.error))
        return UpdateResult(uninstalled=uninstalled, install=install, error=install.error)

    def start_command(self, entry: CatalogEntry) -> List[str]:
        if entry.start_command:
            return shlex.split(entry.start_command)
        return [self.start_interpreter, entry.start_file or self.default_start_file]

    def start(self, entry: CatalogEntry) -> Any:
        """
        Launch an installed entry without waiting for it

        Raises:
            NotInstalledError: If the folder does not exist
            StartFileNotFoundError: If the start file is missing
        """
        folder = self.folder_for(entry)
        if not self.directories.directory_exists(folder):
            raise NotInstalledError(entry.name)

        if entry.start_file or not entry.start_command:
            start_file = entry.start_file or self.default_start_file
            if not (folder / start_file).is_file():
                raise StartFileNotFoundError(entry.name, start_file)

        command = self.start_command(entry)
        logger.info("starting", entry=entry.name, command=command, folder=str(folder))
        return self.launcher.launch(command, folder)
