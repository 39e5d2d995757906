"""Configuration management for paramstore.

Supports layered configuration with priority: CLI args > ENV vars > .env file > defaults
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paramstore.storage import DataMode, ParamStore

DEFAULT_PARAMS_FILENAME = "params.dat"


def _get_default_data_dir() -> Path:
    """Get platform-appropriate default data directory using platformdirs.

    Uses OS-specific conventions:
    - macOS: ~/Library/Application Support/paramstore
    - Windows: %APPDATA%/paramstore
    - Linux: ~/.local/share/paramstore
    """
    return Path(platformdirs.user_data_dir("paramstore", "paramstore"))


def get_user_log_dir() -> Path:
    """Get platform-appropriate user logs directory."""
    return Path(platformdirs.user_log_dir("paramstore", "paramstore"))


class Settings(BaseSettings):
    """Application settings with layered configuration support.

    Configuration is loaded in the following priority (highest to lowest):
    1. CLI arguments (passed directly to Settings())
    2. Environment variables (prefixed with PARAMSTORE_)
    3. .env file (if present in current directory)
    4. Default values

    Example:
        ```python
        settings = get_settings()
        store = settings.open_store()
        ```

    Environment variables:
        PARAMSTORE_PARAMS_FILE: Parameter file (default: <data_dir>/params.dat)
        PARAMSTORE_MODE: plain, compressed or encrypted (default: plain)
        PARAMSTORE_PASSPHRASE: Encryption passphrase
        PARAMSTORE_DATA_DIR: Data directory path
        PARAMSTORE_LOG_LEVEL: Logging level (default: WARNING)
    """

    model_config = SettingsConfigDict(
        env_prefix="PARAMSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Store
    data_dir: Path = Field(
        default_factory=_get_default_data_dir,
        description="Base directory for the default parameter file",
    )
    params_file: Path | None = Field(
        default=None,
        description="Parameter file path (default: <data_dir>/params.dat)",
    )
    mode: DataMode = Field(
        default=DataMode.PLAIN,
        description="Value encoding: plain, compressed or encrypted",
    )
    passphrase: SecretStr = Field(
        default=SecretStr(""),
        description="Passphrase for encrypted mode",
    )

    # Logging
    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="text",
        description="Log format: 'text' for human-readable, 'json' for structured logging",
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file (in addition to console)",
    )
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024,  # 10 MB
        ge=1024,
        le=100 * 1024 * 1024,
        description="Maximum size of each log file before rotation",
    )
    log_file_backup_count: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Number of backup log files to keep",
    )

    @field_validator("mode", mode="before")
    @classmethod
    def parse_mode(cls, v: Any) -> DataMode:
        """Accept mode names ("encrypted") as well as numbers."""
        if isinstance(v, str | int):
            return DataMode.parse(v)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is supported."""
        valid_formats = {"text", "json"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of: {', '.join(valid_formats)}")
        return v_lower

    @property
    def params_path(self) -> Path:
        """Parameter file to open."""
        if self.params_file is not None:
            return self.params_file
        return self.data_dir / DEFAULT_PARAMS_FILENAME

    @property
    def log_dir(self) -> Path:
        """Directory for log files (uses platform-specific directory)."""
        return get_user_log_dir()

    @property
    def log_file_path(self) -> Path:
        """Path to the main log file."""
        return self.log_dir / "paramstore.log"

    def open_store(self) -> ParamStore:
        """Open (or create) the configured parameter file.

        Raises:
            StorageError: If the store cannot be opened
        """
        return ParamStore(self.params_path, self.mode, self.passphrase.get_secret_value())

    def print_config(self) -> None:
        """Print current configuration to stdout."""
        print("paramstore Configuration:")
        print(f"  Parameter File: {self.params_path}")
        print(f"  Mode: {self.mode.name.lower()}")
        print(f"  Passphrase: {'set' if self.passphrase.get_secret_value() else 'not set'}")
        print(f"  Data Directory: {self.data_dir}")
        print(f"  Debug: {self.debug}")
        print(f"  Log Level: {self.log_level}")
        print(f"  Log Format: {self.log_format}")
        print(f"  Log to File: {self.log_to_file}")
        if self.log_to_file:
            print(f"  Log File: {self.log_file_path}")
            print(f"  Log Max Size: {self.log_file_max_bytes / (1024 * 1024):.1f} MB")
            print(f"  Log Backup Count: {self.log_file_backup_count}")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload settings,
    call reset_settings() first.
    """
    return Settings()


def reset_settings() -> None:
    """Clear settings cache to force reload on next get_settings() call."""
    get_settings.cache_clear()
