"""Config-file binder: ``key = value`` files mapped onto an explicit field table."""

from paramstore.binder.config_file import (
    ConfigField,
    ConfigSource,
    FieldKind,
    create_config_file,
    format_value,
    process_config,
    read_config,
)
from paramstore.binder.logs import ConfLogger, NullLogger

__all__ = [
    "ConfigField",
    "ConfigSource",
    "FieldKind",
    "process_config",
    "read_config",
    "create_config_file",
    "format_value",
    "ConfLogger",
    "NullLogger",
]
