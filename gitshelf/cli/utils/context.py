"""CLI context management."""

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console

from gitshelf.cli.utils.config import ConfigManager
from gitshelf.cli.utils.output import OutputFormatter
from gitshelf.config import Settings
from gitshelf.core.catalog import CatalogStore
from gitshelf.core.lifecycle import LifecycleManager
from gitshelf.infrastructure.http import HostingClient


@dataclass
class CLIContext:
    """Context object passed through CLI commands."""

    debug: bool
    settings: Settings
    config: ConfigManager
    formatter: OutputFormatter
    console: Console
    _client: Optional[HostingClient] = field(default=None, repr=False)
    _lifecycle: Optional[LifecycleManager] = field(default=None, repr=False)

    def get_catalog(self) -> CatalogStore:
        return CatalogStore(self.settings.resolved_catalog_path)

    def get_client(self) -> HostingClient:
        """
        Get configured hosting client.

        Returns:
            HostingClient instance, created on first use
        """
        if self._client is None:
            self._client = HostingClient(
                api_base_url=self.settings.api_base_url,
                raw_base_url=self.settings.raw_base_url,
                token=self.settings.github_token,
                timeout=self.settings.http_timeout,
            )
        return self._client

    def get_lifecycle(self) -> LifecycleManager:
        if self._lifecycle is None:
            self._lifecycle = LifecycleManager.from_settings(self.settings, self.get_client())
        return self._lifecycle

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None
