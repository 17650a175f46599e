"""Configuration file management for the gitshelf CLI."""

from pathlib import Path
from typing import Any, Dict, Optional

import toml
import yaml
from rich.console import Console

console = Console(stderr=True)


class ConfigManager:
    """Read and write the CLI configuration file."""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.config_path = Path(config_file) if config_file else self._get_default_config_path()
        self.config: Dict[str, Any] = {}
        self._load_config()

    def _get_default_config_path(self) -> Path:
        """Get default configuration file path."""
        return Path.home() / ".gitshelf" / "config.yml"

    def _is_toml(self) -> bool:
        return self.config_path.suffix.lower() == ".toml"

    def _load_config(self):
        """Load configuration from file, if there is one."""
        if not self.config_path.exists():
            self.config = {}
            return

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                if self._is_toml():
                    self.config = toml.load(f)
                else:
                    # YAML for .yml, .yaml and anything else
                    self.config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError, toml.TomlDecodeError) as e:
            console.print(f"[yellow]Warning: Failed to load config: {e}[/yellow]")
            self.config = {}

        if not isinstance(self.config, dict):
            console.print("[yellow]Warning: Config file does not hold a mapping, ignoring it[/yellow]")
            self.config = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        """
        Set configuration value.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self.config[key] = value

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        return self.config.copy()

    def save(self):
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w", encoding="utf-8") as f:
            if self._is_toml():
                toml.dump(self.config, f)
            else:
                yaml.safe_dump(self.config, f, default_flow_style=False)

        # May hold a token
        self.config_path.chmod(0o600)
