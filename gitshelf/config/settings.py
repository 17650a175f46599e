from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple, Type

from pydantic import Field, field_validator, model_validator
from pydantic_settings import (BaseSettings, PydanticBaseSettingsSource,
                               SettingsConfigDict)


class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(
        env_prefix="GITSHELF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Local layout
    install_root: Path = Field(
        default=Path("."), description="Directory that holds installed folders"
    )
    catalog_path: Path = Field(
        default=Path("available.json"),
        description="Catalog file, relative paths resolve against install_root",
    )

    # Hosting API
    api_base_url: str = Field(
        default="https://api.github.com", description="Hosting REST API base URL"
    )
    raw_base_url: str = Field(
        default="https://raw.githubusercontent.com",
        description="Raw file content base URL",
    )
    github_token: Optional[str] = Field(
        default=None, description="Optional token sent with API requests"
    )
    http_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    # Retry policies
    fetch_retries: int = Field(
        default=3, ge=0, description="Retries per file after the first attempt"
    )
    fetch_retry_delay: float = Field(
        default=1.0, ge=0, description="Fixed delay between fetch attempts (seconds)"
    )
    remove_attempts: int = Field(
        default=5, ge=1, description="Total attempts when deleting a folder"
    )
    remove_retry_delay: float = Field(
        default=0.5, ge=0, description="Fixed delay between delete attempts (seconds)"
    )

    # Post-install and start
    dependency_installers: Dict[str, str] = Field(
        default_factory=lambda: {"package.json": "npm install"},
        description="Manifest file name mapped to the command that installs it",
    )
    start_interpreter: str = Field(
        default="node", description="Interpreter used to run an entry's start file"
    )
    default_start_file: str = Field(
        default="index.js", description="Start file used when an entry names none"
    )

    # Self-update
    self_update_enabled: bool = Field(default=False, description="Check for tool updates")
    self_update_url: Optional[str] = Field(
        default=None, description="Base URL the tool's own files are fetched from"
    )
    self_update_files: List[str] = Field(
        default_factory=list, description="Files compared against the upstream copy"
    )
    self_update_root: Optional[Path] = Field(
        default=None, description="Directory holding the tool's own files, required when self-update is enabled"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log output format"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Values passed in come from the config file; the environment wins over them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("api_base_url", "raw_base_url", "self_update_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/") if isinstance(v, str) else v

    @model_validator(mode="after")
    def require_self_update_root(self) -> "Settings":
        if self.self_update_enabled and self.self_update_root is None:
            raise ValueError("self_update_root must be set when self_update_enabled is true")
        return self

    @property
    def resolved_install_root(self) -> Path:
        return self.install_root.expanduser().resolve()

    @property
    def resolved_catalog_path(self) -> Path:
        path = self.catalog_path.expanduser()
        if not path.is_absolute():
            path = self.resolved_install_root / path
        return path

    @property
    def fetch_attempts(self) -> int:
        return self.fetch_retries + 1


def load_settings(
    file_values: Optional[Dict[str, Any]] = None, **overrides: Any
) -> Settings:
    """
    Build settings from config file values, the environment and CLI overrides.

    Args:
        file_values: Values read from the configuration file
        **overrides: Explicit values (CLI flags); ``None`` values are ignored

    Returns:
        Settings instance
    """
    base = Settings(**(file_values or {}))
    update = {key: value for key, value in overrides.items() if value is not None}
    if not update:
        return base
    return Settings.model_validate({**base.model_dump(), **update})

