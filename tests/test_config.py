"""Tests for settings loading."""

import pytest

from sewline.config import Settings, load_settings
from sewline.domain.policies import VariancePolicy

ENV_VARS = [
    "SEWLINE_LOG_LEVEL",
    "SEWLINE_START_HOUR",
    "SEWLINE_END_HOUR",
    "SEWLINE_LUNCH_HOUR",
    "SEWLINE_DEFAULT_EFFICIENCY",
    "SEWLINE_VARIANCE_POLICY",
]


class TestLoadSettings:
    """Tests for load_settings."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        """Start every test without SEWLINE_* variables.

        Setting before deleting makes monkeypatch also undo values that
        load_dotenv writes during the test.
        """
        for name in ENV_VARS:
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

    @pytest.fixture
    def env_file(self, tmp_path):
        """An empty .env file so the working directory is never searched."""
        path = tmp_path / ".env"
        path.write_text("")
        return str(path)

    def test_defaults(self, env_file):
        """Unset variables give the standard settings."""
        assert load_settings(env_file) == Settings()

    def test_from_environment(self, monkeypatch, env_file):
        """Variables override defaults."""
        monkeypatch.setenv("SEWLINE_LOG_LEVEL", "debug")
        monkeypatch.setenv("SEWLINE_START_HOUR", "8")
        monkeypatch.setenv("SEWLINE_END_HOUR", "16")
        monkeypatch.setenv("SEWLINE_DEFAULT_EFFICIENCY", "0.65")
        monkeypatch.setenv("SEWLINE_VARIANCE_POLICY", "EMIT_BOTH")
        settings = load_settings(env_file)

        assert settings.log_level == "DEBUG"
        assert settings.start_hour == 8
        assert settings.default_efficiency == 0.65
        assert settings.variance_policy is VariancePolicy.EMIT_BOTH
        assert settings.slot_config().trailing_label == "16:36"
        assert settings.alert_thresholds().variance_policy is VariancePolicy.EMIT_BOTH

    def test_from_env_file(self, tmp_path):
        """Variables can come from a .env file."""
        path = tmp_path / "line.env"
        path.write_text("SEWLINE_LUNCH_HOUR=12\n")
        settings = load_settings(str(path))

        assert settings.lunch_hour == 12

    @pytest.mark.parametrize(
        "name,value",
        [
            ("SEWLINE_START_HOUR", "nine"),
            ("SEWLINE_DEFAULT_EFFICIENCY", "high"),
            ("SEWLINE_DEFAULT_EFFICIENCY", "1.5"),
            ("SEWLINE_VARIANCE_POLICY", "sometimes"),
            ("SEWLINE_LOG_LEVEL", "LOUD"),
            ("SEWLINE_END_HOUR", "5"),
        ],
    )
    def test_invalid_values(self, monkeypatch, env_file, name, value):
        """Unparseable values raise ValueError."""
        monkeypatch.setenv(name, value)

        with pytest.raises(ValueError, match=name):
            load_settings(env_file)
