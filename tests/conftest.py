"""Pytest configuration and shared fixtures for paramstore tests.

Fixtures:
- params_path: Location for a fresh parameter file (not yet created)
- passphrase: Passphrase used for encrypted stores
- make_store: Factory opening a ParamStore at params_path
- clean_env: Removes PARAMSTORE_* variables and resets cached settings
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from paramstore.config import reset_settings
from paramstore.storage import DataMode, ParamStore


@pytest.fixture
def params_path(tmp_path: Path) -> Path:
    """Path of a parameter file that does not exist yet."""
    return tmp_path / "service.params"


@pytest.fixture
def passphrase() -> str:
    return "correct horse battery staple"


@pytest.fixture
def make_store(params_path: Path, passphrase: str) -> Callable[..., ParamStore]:
    """Factory opening (or creating) a store at params_path.

    Returns:
        Callable taking a DataMode and an optional passphrase override
    """

    def factory(mode: DataMode = DataMode.PLAIN, key: str | None = None) -> ParamStore:
        return ParamStore(params_path, mode, passphrase if key is None else key)

    return factory


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Isolate settings from the developer's environment and .env file."""
    for name in list(os.environ):
        if name.upper().startswith("PARAMSTORE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PARAMSTORE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()
