"""
Tests for environment-driven settings

Run with: python -m pytest tests/test_config.py -v
"""

import pytest

from amatc_audit.config import DEFAULT_REFERENCE_URL, DEFAULT_STATION_ID, Settings
from amatc_audit.errors import ConfigError

ENV_VARS = [
    "NOAA_TOKEN",
    "AMATC_STATION_ID",
    "AMATC_MONTH",
    "AMATC_REFERENCE_URL",
    "AMATC_REQUEST_DELAY",
    "AMATC_REQUEST_TIMEOUT",
    "AMATC_HINDCAST_START",
    "AMATC_HINDCAST_END",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Test suite for Settings.from_env."""

    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.token is None
        assert settings.station_id == DEFAULT_STATION_ID
        assert settings.month == 4
        assert settings.reference_url == DEFAULT_REFERENCE_URL
        assert settings.request_delay_seconds == 1.0
        assert settings.request_timeout_seconds == 30.0
        assert settings.hindcast_start == 1980
        assert settings.hindcast_end is None

    def test_overrides(self, clean_env):
        clean_env.setenv("NOAA_TOKEN", "abc123")
        clean_env.setenv("AMATC_STATION_ID", "GHCND:USW00026411")
        clean_env.setenv("AMATC_MONTH", "5")
        clean_env.setenv("AMATC_REQUEST_DELAY", "0.25")

        settings = Settings.from_env()

        assert settings.token == "abc123"
        assert settings.station_id == "GHCND:USW00026411"
        assert settings.month == 5
        assert settings.request_delay_seconds == 0.25
        assert settings.require_token() == "abc123"

    def test_missing_token(self, clean_env):
        with pytest.raises(ConfigError, match="NOAA_TOKEN"):
            Settings.from_env().require_token()

    def test_blank_token_is_missing(self, clean_env):
        clean_env.setenv("NOAA_TOKEN", "")
        assert Settings.from_env().token is None

    @pytest.mark.parametrize("month", ["0", "13", "april"])
    def test_bad_month(self, clean_env, month):
        clean_env.setenv("AMATC_MONTH", month)
        with pytest.raises(ConfigError):
            Settings.from_env()

    def test_negative_delay(self, clean_env):
        clean_env.setenv("AMATC_REQUEST_DELAY", "-1")
        with pytest.raises(ConfigError):
            Settings.from_env()

    def test_hindcast_range(self, clean_env):
        clean_env.setenv("AMATC_HINDCAST_START", "1995")
        clean_env.setenv("AMATC_HINDCAST_END", "2005")

        settings = Settings.from_env()

        assert (settings.hindcast_start, settings.hindcast_end) == (1995, 2005)

    def test_blank_hindcast_end_means_last_year(self, clean_env):
        clean_env.setenv("AMATC_HINDCAST_END", "")
        assert Settings.from_env().hindcast_end is None

    @pytest.mark.parametrize("name", ["AMATC_HINDCAST_START", "AMATC_HINDCAST_END"])
    def test_bad_hindcast_year(self, clean_env, name):
        clean_env.setenv(name, "nineteen-eighty")
        with pytest.raises(ConfigError, match=name):
            Settings.from_env()

    def test_hindcast_end_before_start(self, clean_env):
        clean_env.setenv("AMATC_HINDCAST_START", "2000")
        clean_env.setenv("AMATC_HINDCAST_END", "1999")
        with pytest.raises(ConfigError):
            Settings.from_env()


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
