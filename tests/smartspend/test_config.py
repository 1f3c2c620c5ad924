"""Tests for profile-based settings."""

from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from smartspend.config import (
    DatabaseConfig,
    SmartSpendSettings,
    clear_settings_cache,
    get_current_profile,
    get_database_config,
    get_settings,
    reload_settings,
    set_current_profile,
)
from smartspend.database import SmartSpendDB
from smartspend.storage import DuckDBBackend, SnapshotBackend, create_backend


class TestProfiles:
    """Profile selection and caching."""

    @pytest.mark.unit
    def test_default_profile_is_test(self) -> None:
        assert get_current_profile() == "test"

    @pytest.mark.unit
    def test_set_current_profile(self) -> None:
        set_current_profile("alice")

        assert get_current_profile() == "alice"
        assert get_settings().profile == "alice"

    @pytest.mark.unit
    @pytest.mark.parametrize("profile", ["bad/profile", "bad profile", ""])
    def test_invalid_profile_rejected(self, profile: str) -> None:
        with pytest.raises(ValueError):
            set_current_profile(profile)

    @pytest.mark.unit
    def test_settings_are_cached_per_profile(self) -> None:
        assert get_settings() is get_settings()
        assert get_settings("bob") is not get_settings()

    @pytest.mark.unit
    def test_reload_picks_up_environment_changes(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        assert get_database_config().backend == "duckdb"

        monkeypatch.setenv("SMARTSPEND_DATABASE__BACKEND", "snapshot")

        assert get_database_config().backend == "duckdb"
        assert reload_settings().database.backend == "snapshot"


class TestSettingsValues:
    """Derived paths, zones, and validation."""

    @pytest.mark.unit
    def test_default_paths_live_under_profile_directory(self, tmp_path: Path) -> None:
        settings = get_settings()

        assert settings.duckdb_path == tmp_path / "data" / "test" / "smartspend.duckdb"
        assert settings.snapshot_path == tmp_path / "data" / "test" / "smartspend.json"
        assert settings.duckdb_path.parent.is_dir()

    @pytest.mark.unit
    def test_explicit_paths_win(self, tmp_path: Path) -> None:
        settings = SmartSpendSettings(
            database=DatabaseConfig(
                path=tmp_path / "mine.duckdb", snapshot_path=tmp_path / "mine.json"
            )
        )

        assert settings.duckdb_path == tmp_path / "mine.duckdb"
        assert settings.snapshot_path == tmp_path / "mine.json"

    @pytest.mark.unit
    def test_bad_file_extensions_rejected(self) -> None:
        with pytest.raises(ValueError, match="duckdb"):
            DatabaseConfig(path=Path("data/store.sqlite"))
        with pytest.raises(ValueError, match="json"):
            DatabaseConfig(snapshot_path=Path("data/store.yaml"))

    @pytest.mark.unit
    def test_timezone_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SMARTSPEND_TIMEZONE", "Asia/Kolkata")
        clear_settings_cache()

        assert get_settings().tzinfo == ZoneInfo("Asia/Kolkata")

    @pytest.mark.unit
    def test_unknown_timezone_is_a_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SMARTSPEND_TIMEZONE", "Mars/Olympus_Mons")

        with pytest.raises(ValueError, match="Configuration error"):
            get_settings()

    @pytest.mark.unit
    def test_no_timezone_means_device_local(self) -> None:
        assert get_settings().tzinfo is None


class TestBackendSelection:
    """create_backend and SmartSpendDB.from_settings."""

    @pytest.mark.unit
    def test_duckdb_is_default(self) -> None:
        backend = create_backend(get_settings())

        assert isinstance(backend, DuckDBBackend)
        assert backend.database_path == get_settings().duckdb_path

    @pytest.mark.unit
    def test_snapshot_backend_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SMARTSPEND_DATABASE__BACKEND", "snapshot")
        monkeypatch.setenv("SMARTSPEND_DATABASE__FLUSH_DELAY_MS", "250")

        backend = create_backend(get_settings())

        assert isinstance(backend, SnapshotBackend)
        assert backend.flush_delay == 0.25

    @pytest.mark.integration
    def test_from_settings_uses_profile_store(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SMARTSPEND_TIMEZONE", "Asia/Kolkata")

        with SmartSpendDB.from_settings() as db:
            assert db.tz == ZoneInfo("Asia/Kolkata")
            assert len(db.categories.list_all()) == 12

        assert get_settings().duckdb_path.exists()
