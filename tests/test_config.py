# ==============================================
# Tests for Configuration Loading
# ==============================================

import pytest

from smartzprod.config import AppConfig, Band, ValidationConfig, check_bands, load_config
from smartzprod.errors import ConfigError


class TestLoadConfig:
    def test_defaults(self, clean_env):
        config = load_config(str(clean_env))
        assert config == AppConfig()
        assert config.validation.match_factor_warn == Band(0.1, 2.0)
        assert config.storage.data_dir == "data/"
        assert config.timing.debounce_seconds == 0.2

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "SMARTZPROD_DATA_DIR=/var/smartzprod\n"
            "SMARTZPROD_MF_WARN_MAX=2.5\n"
            "SMARTZPROD_BACKUP_PREFIX=Site7\n",
            encoding="utf-8",
        )
        config = load_config(str(env_file))
        assert config.storage.data_dir == "/var/smartzprod"
        assert config.validation.match_factor_warn.maximum == 2.5
        assert config.backup.file_prefix == "Site7"

    def test_each_call_returns_a_fresh_value(self, clean_env, monkeypatch):
        first = load_config(str(clean_env))
        monkeypatch.setenv("SMARTZPROD_THROTTLE_SECONDS", "1.5")
        second = load_config(str(clean_env))
        assert first.timing.throttle_seconds == 0.2
        assert second.timing.throttle_seconds == 1.5

    def test_not_a_number(self, clean_env, monkeypatch):
        monkeypatch.setenv("SMARTZPROD_MF_WARN_MIN", "low")
        with pytest.raises(ConfigError):
            load_config(str(clean_env))

    def test_optimal_outside_warn(self, clean_env, monkeypatch):
        monkeypatch.setenv("SMARTZPROD_MF_OPTIMAL_MAX", "2.5")
        with pytest.raises(ConfigError):
            load_config(str(clean_env))

    def test_config_is_frozen(self):
        config = AppConfig()
        with pytest.raises(AttributeError):
            config.storage = None


class TestBands:
    def test_empty_band(self):
        with pytest.raises(ConfigError):
            check_bands(ValidationConfig(match_factor_warn=Band(2.0, 0.1)))

    def test_band_text(self):
        assert str(Band(0.1, 2.0)) == "0.1 - 2.0"
