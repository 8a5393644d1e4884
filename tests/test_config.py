"""Tests for settings."""

import pytest
from pydantic import ValidationError

from workout_streams.config import Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        monkeypatch.delenv("WORKOUT_STREAMS_SPLIT_DISTANCE_M", raising=False)
        settings = Settings(_env_file=None)

        assert settings.split_distance_m == 1000.0
        assert settings.log_level == "INFO"
        assert settings.export_path is None
        assert settings.batch_size == 100
        assert settings.delivery_delay_s == 0.0

    def test_environment(self, monkeypatch):
        """Test values are read from prefixed environment variables."""
        monkeypatch.setenv("WORKOUT_STREAMS_SPLIT_DISTANCE_M", "1609.344")
        monkeypatch.setenv("WORKOUT_STREAMS_BATCH_SIZE", "25")

        settings = Settings(_env_file=None)

        assert settings.split_distance_m == pytest.approx(1609.344)
        assert settings.batch_size == 25

    @pytest.mark.parametrize("field", ["split_distance_m", "batch_size"])
    def test_must_be_positive(self, field):
        """Test non-positive values are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})

    def test_split_distance_above_tolerance(self):
        """Test split distances within the distance tolerance are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, split_distance_m=5e-7)

    def test_get_settings_cached(self):
        """Test get_settings returns one instance."""
        get_settings.cache_clear()

        assert get_settings() is get_settings()
