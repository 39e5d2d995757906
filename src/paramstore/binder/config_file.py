"""Bind ``key = value`` config files to an explicit table of typed fields.

A service describes its settings as a list of :class:`ConfigField` entries,
each pairing a config key and a description with a getter/setter for the
value it controls. :func:`process_config` then either creates the config file
from the current (default) values or loads an existing file into the fields.

File format::

    ###   My service   ###
    # ...header comments...

    # Port to listen on
    port = 8080

Lines are ``key = value`` with exactly one ``=``. Lines starting with ``#``
and blank lines are ignored. Unknown keys are skipped; values that fail to
parse are logged and skipped without aborting the load.
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from paramstore.binder.logs import ConfLogger, NullLogger
from paramstore.storage.errors import StorageError
from paramstore.storage.helpers import atomic_write

_INT_PATTERN = re.compile(r"[+-]?\d+")
_UINT_PATTERN = re.compile(r"\+?\d+")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

HEADER_TEMPLATE = (
    "###   {description}   ###\n"
    "#\n"
    '# Config file contains "Name" and "Value" of parameters separated by a symbol "="\n'
    '# Symbol "=" is allowed to use no more than 1 piece per line\n'
    "# If this file is deleted, the service will automatically create a new file at startup\n"
    "# File will be filled with all valid parameters with default values\n"
    "#\n"
    '# Comments should start with the "#" character from the beginning of the line\n'
    "\n\n"
)


class FieldKind(str, Enum):
    """Value types a config field may hold."""

    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    TEXT = "text"


def _parse_int(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def _parse_uint(text: str) -> int:
    if not _UINT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    return int(text)


def _parse_bool(text: str) -> bool:
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean: {text!r}")


_PARSERS: dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.INT: _parse_int,
    FieldKind.UINT: _parse_uint,
    FieldKind.FLOAT: float,
    FieldKind.BOOL: _parse_bool,
    FieldKind.TEXT: str,
}


def format_value(value: Any) -> str:
    """Render a field value the way it is written into config files."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class ConfigField:
    """One bindable config entry.

    Attributes:
        key: Name in the config file (no spaces, no ``=``)
        description: Comment written above the entry
        kind: Value type, selects the parser
        getter: Returns the current value (written as the default)
        setter: Receives the parsed value on load
    """

    key: str
    description: str
    kind: FieldKind
    getter: Callable[[], Any]
    setter: Callable[[Any], None]

    @classmethod
    def for_attribute(
        cls,
        target: object,
        attr: str,
        key: str,
        description: str,
        kind: FieldKind,
    ) -> ConfigField:
        """Build a field reading and writing ``target.<attr>``.

        Example:
            ```python
            fields = [
                ConfigField.for_attribute(cfg, "port", "port", "Listen port", FieldKind.UINT),
            ]
            ```
        """

        def getter() -> Any:
            return getattr(target, attr)

        def setter(value: Any) -> None:
            setattr(target, attr, value)

        return cls(key=key, description=description, kind=kind, getter=getter, setter=setter)


class ConfigSource(Protocol):
    """What a service exposes to have its config file processed."""

    def conf_file_name(self) -> str:
        """Path (or just name) of the config file."""
        ...

    def conf_fields(self) -> Sequence[ConfigField]:
        """Field table bound to the service's settings."""
        ...

    def conf_description(self) -> str:
        """Title written into the header of a new config file."""
        ...


def process_config(source: ConfigSource, log: ConfLogger | None = None) -> bool:
    """Create or load the config file of ``source``.

    If the file exists, its values are parsed into the fields. Otherwise it is
    created from the fields' current values.

    Args:
        source: Service exposing file name, fields and description
        log: Logging sink (default: discard)

    Returns:
        True if the file was loaded or created, False on failure (already logged)
    """
    if log is None:
        log = NullLogger()
    path = Path(source.conf_file_name())

    try:
        log.info(f'Current directory: "{os.getcwd()}"')
    except OSError as e:
        log.error(f'Error in computing the current directory: "{e}"')
    log.info(f'Start to load configuration from "{path}" file')

    try:
        path.stat()
    except FileNotFoundError:
        log.warning("Config file is not exist")
        if not create_config_file(path, source.conf_fields(), source.conf_description(), log):
            log.error("Error occurred when config file creating")
            return False
    except OSError as e:
        log.error(f"Error while checking config file: {e}")
        return False
    else:
        try:
            read_config(path, source.conf_fields(), log)
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"Error while read config file: {e}")
            return False

    log.info("Config file was processed")
    return True


def read_config(path: Path, fields: Sequence[ConfigField], log: ConfLogger | None = None) -> int:
    """Parse a config file into the matching fields.

    Args:
        path: Config file
        fields: Field table; entries are matched by key
        log: Logging sink (default: discard)

    Returns:
        Number of lines that were not ``key = value`` pairs

    Raises:
        OSError: If the file cannot be read
    """
    if log is None:
        log = NullLogger()

    by_key: dict[str, ConfigField] = {}
    for field in fields:
        if field.key:
            by_key.setdefault(field.key, field)

    log.info("Reading config file started")
    bad_lines = 0

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        words = line.split("=")
        if len(words) != 2:
            bad_lines += 1
            log.debug(f'Incorrect string was read: "{line}"')
            continue

        name = words[0].strip()
        text = words[1].strip()

        field = by_key.get(name)
        if field is None:
            continue

        parser = _PARSERS.get(field.kind)
        if parser is None:
            log.error(
                f'Type "{field.kind}" of parameter "{name}" was skipped while processing config file'
            )
            continue

        try:
            value = parser(text)
        except ValueError as e:
            log.error(
                f'Parameter "{name}", error when converting string "{text}" '
                f"to {field.kind.value}. Error: {e}"
            )
            continue

        log.debug(f'Parameter "{name}" ({field.kind.value}) matched, assigning value: {text}')
        field.setter(value)

    return bad_lines


def create_config_file(
    path: Path,
    fields: Sequence[ConfigField],
    description: str,
    log: ConfLogger | None = None,
) -> bool:
    """Write a new config file holding every field's current value.

    Returns:
        True on success, False if the file could not be written (logged)
    """
    if log is None:
        log = NullLogger()

    log.info("Creating config file...")

    parts = [HEADER_TEMPLATE.format(description=description)]
    for field in fields:
        if not field.key:
            continue
        parts.append(f"\n# {field.description}\n{field.key} = {format_value(field.getter())}\n")

    try:
        atomic_write(path, "".join(parts))
    except StorageError as e:
        log.error(f"Error while creating config file. Err: {e}")
        return False

    log.info("Config file was created and filled with default values")
    return True
