"""Logging sink accepted by the config binder."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ConfLogger(Protocol):
    """Four-level logging sink. A ``logging.Logger`` satisfies it as is."""

    def debug(self, msg: str) -> None: ...

    def info(self, msg: str) -> None: ...

    def warning(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...


class NullLogger:
    """Logger that discards everything. Used when the caller supplies none."""

    def debug(self, msg: str) -> None:
        pass

    def info(self, msg: str) -> None:
        pass

    def warning(self, msg: str) -> None:
        pass

    def error(self, msg: str) -> None:
        pass
