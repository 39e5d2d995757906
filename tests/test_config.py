"""Tests for layered settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from paramstore.config import DEFAULT_PARAMS_FILENAME, Settings, get_settings, reset_settings
from paramstore.storage import DataMode, ParamStore

pytestmark = pytest.mark.usefixtures("clean_env")


class TestMode:
    """Tests for the mode setting."""

    def test_default_is_plain(self) -> None:
        assert Settings().mode is DataMode.PLAIN

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("plain", DataMode.PLAIN),
            ("Compressed", DataMode.COMPRESSED),
            ("ENCRYPTED", DataMode.ENCRYPTED),
            ("2", DataMode.ENCRYPTED),
            (1, DataMode.COMPRESSED),
        ],
    )
    def test_accepts_names_and_numbers(self, value: str | int, expected: DataMode) -> None:
        assert Settings(mode=value).mode is expected

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PARAMSTORE_MODE", "compressed")

        assert Settings().mode is DataMode.COMPRESSED

    def test_from_env_file(self, tmp_path: Path) -> None:
        """A .env file in the working directory is honored."""
        (tmp_path / ".env").write_text("PARAMSTORE_MODE=encrypted\n")

        assert Settings().mode is DataMode.ENCRYPTED

    def test_environment_beats_env_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / ".env").write_text("PARAMSTORE_MODE=encrypted\n")
        monkeypatch.setenv("PARAMSTORE_MODE", "plain")

        assert Settings().mode is DataMode.PLAIN

    @pytest.mark.parametrize("value", ["zipped", "3", -1])
    def test_unknown_mode(self, value: str | int) -> None:
        with pytest.raises(ValidationError, match="mode"):
            Settings(mode=value)


class TestLogging:
    """Tests for logging settings."""

    def test_log_level_normalized(self) -> None:
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(log_level="LOUD")

    def test_log_format(self) -> None:
        assert Settings(log_format="JSON").log_format == "json"

        with pytest.raises(ValidationError, match="Invalid log format"):
            Settings(log_format="xml")

    def test_log_file_size_bounds(self) -> None:
        with pytest.raises(ValidationError, match="log_file_max_bytes"):
            Settings(log_file_max_bytes=10)

    def test_log_file_path(self) -> None:
        settings = Settings()

        assert settings.log_file_path.name == "paramstore.log"
        assert settings.log_file_path.parent == settings.log_dir


class TestPaths:
    """Tests for parameter file location."""

    def test_default_params_path(self, tmp_path: Path) -> None:
        assert Settings().params_path == tmp_path / "data" / DEFAULT_PARAMS_FILENAME

    def test_explicit_params_file(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere" / "svc.params"

        assert Settings(params_file=target).params_path == target

    def test_params_file_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PARAMSTORE_PARAMS_FILE", str(tmp_path / "env.params"))

        assert Settings().params_path == tmp_path / "env.params"


class TestOpenStore:
    """Tests for Settings.open_store()."""

    def test_creates_default_file(self, tmp_path: Path) -> None:
        store = Settings().open_store()

        assert isinstance(store, ParamStore)
        assert store.path == tmp_path / "data" / DEFAULT_PARAMS_FILENAME
        assert store.path.exists()

    def test_encrypted_store_uses_passphrase(self, tmp_path: Path) -> None:
        target = tmp_path / "secret.params"
        Settings(params_file=target, mode="encrypted", passphrase="s3cret").open_store().set(
            "token", "abc"
        )

        reopened = Settings(params_file=target, mode="encrypted", passphrase="s3cret").open_store()

        assert reopened.get("token") == "abc"


class TestSecrets:
    """Tests for passphrase handling."""

    def test_passphrase_hidden_from_repr(self) -> None:
        settings = Settings(passphrase="hunter2-passphrase")

        assert "hunter2-passphrase" not in repr(settings)
        assert settings.passphrase.get_secret_value() == "hunter2-passphrase"

    def test_print_config_masks_passphrase(self, capsys: pytest.CaptureFixture[str]) -> None:
        Settings(passphrase="hunter2-passphrase", mode="encrypted").print_config()

        out = capsys.readouterr().out
        assert "Passphrase: set" in out
        assert "Mode: encrypted" in out
        assert "hunter2-passphrase" not in out

    def test_print_config_without_passphrase(self, capsys: pytest.CaptureFixture[str]) -> None:
        Settings().print_config()

        assert "Passphrase: not set" in capsys.readouterr().out


class TestSettingsCache:
    """Tests for get_settings() caching."""

    def test_cached_until_reset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("PARAMSTORE_MODE", "compressed")
        assert get_settings().mode is DataMode.PLAIN

        reset_settings()
        assert get_settings().mode is DataMode.COMPRESSED
