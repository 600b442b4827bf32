"""
Tests for TOML configuration loading and saving.
"""

import pytest

from trackduel.core.config import (
    Config,
    LoggingConfig,
    ensure_directories,
    get_config_dir,
    get_data_dir,
    load_config,
    save_config,
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep config lookups and env overrides away from the real home."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.delenv("TRACKDUEL_SEED", raising=False)
    monkeypatch.delenv("TRACKDUEL_LOG_LEVEL", raising=False)


class TestLoadConfig:
    """Test reading config.toml."""

    def test_reads_sections(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            "[tournament]\nseed = 42\nrestart_when_complete = false\n\n"
            "[export]\nindent = 4\nstrict_import = false\n\n"
            "[logging]\nlevel = \"DEBUG\"\nretention = 2\n",
            encoding="utf-8",
        )
        config = load_config(path)

        assert config.tournament.seed == 42
        assert config.tournament.restart_when_complete is False
        assert config.export.indent == 4
        assert config.export.strict_import is False
        assert config.logging.level == "DEBUG"
        assert config.logging.retention == 2
        assert config.logging.rotation_mb == 10

    def test_missing_sections_use_defaults(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[tournament]\nseed = 1\n", encoding="utf-8")
        config = load_config(path)
        assert config.export.strict_import is True
        assert config.logging.level == "INFO"

    def test_creates_default_file(self, tmp_path):
        path = tmp_path / "new" / "config.toml"
        config = load_config(path)
        assert path.exists()
        assert config == Config()
        # The generated file must parse back to the same defaults
        assert load_config(path).tournament == config.tournament

    def test_invalid_values_fall_back_to_defaults(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text("[logging]\nlevel = \"LOUD\"\n", encoding="utf-8")
        config = load_config(path)
        assert config.logging.level == "INFO"
        assert "Using default configuration" in capsys.readouterr().out

    def test_broken_toml_falls_back(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[tournament\nseed = ", encoding="utf-8")
        assert load_config(path) == Config()

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text("[tournament]\nseed = 1\n", encoding="utf-8")
        monkeypatch.setenv("TRACKDUEL_SEED", "99")
        monkeypatch.setenv("TRACKDUEL_LOG_LEVEL", "warning")
        config = load_config(path)
        assert config.tournament.seed == 99
        assert config.logging.level == "WARNING"

    def test_bad_env_seed(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text("", encoding="utf-8")
        monkeypatch.setenv("TRACKDUEL_SEED", "abc")
        with pytest.raises(ValueError, match="TRACKDUEL_SEED"):
            load_config(path)


class TestSaveConfig:
    """Test writing config.toml."""

    def test_round_trip(self, tmp_path):
        path = tmp_path / "config.toml"
        config = Config()
        config.tournament.seed = 7
        config.export.strict_import = False
        config.logging.log_file = str(tmp_path / "app.log")

        assert save_config(config, path)
        loaded = load_config(path)
        assert loaded.tournament.seed == 7
        assert loaded.export.strict_import is False
        assert loaded.logging.log_file == str(tmp_path / "app.log")


class TestValidate:
    """Test config validation."""

    def test_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="LOUD").validate()

    def test_accepts_lowercase_level(self):
        LoggingConfig(level="debug").validate()


class TestEnsureDirectories:
    """Test creation of the config, data and export directories."""

    def test_creates_all(self, tmp_path):
        config = Config()
        config.export.directory = str(tmp_path / "exports")
        ensure_directories(config)

        assert get_config_dir().is_dir()
        assert get_data_dir().is_dir()
        assert (tmp_path / "exports").is_dir()
