"""
Configuration Validation Tests

Tests for shared/config/settings.py including:
- Field validators
- Threshold ordering
- Production environment validation
- Engine view of the settings
"""

import pytest
from pydantic import ValidationError
from shared.config import Settings

from SIGNALBOOST.config import ScoringThresholds


class TestSettingsValidation:
    """Test configuration validation and constraints"""

    def test_engine_defaults(self):
        """Test default engine values"""
        settings = Settings()

        assert settings.ENGINE_INITIAL_CAPITAL == 10000.0
        assert settings.ENGINE_MIN_BARS == 50
        assert settings.ENGINE_PERIODS_PER_YEAR == 252 * 24
        assert settings.ENGINE_HOLD_THRESHOLD == 0.15
        assert settings.ENGINE_STRONG_THRESHOLD == 0.6
        assert settings.ENGINE_VOTE_THRESHOLD == 0.4
        assert settings.NOTIFY_SYMBOL_DELAY_SECONDS == 0.4

    def test_initial_capital_must_be_positive(self, monkeypatch):
        """Test ENGINE_INITIAL_CAPITAL field constraint"""
        monkeypatch.setenv("ENGINE_INITIAL_CAPITAL", "0")
        with pytest.raises(ValidationError) as exc_info:
            Settings()
        assert "greater than 0" in str(exc_info.value)

    def test_min_bars_constraint(self, monkeypatch):
        """Test ENGINE_MIN_BARS lower bound"""
        monkeypatch.setenv("ENGINE_MIN_BARS", "1")
        with pytest.raises(ValidationError) as exc_info:
            Settings()
        assert "greater than or equal to 2" in str(exc_info.value)

    def test_inverted_rsi_levels(self, monkeypatch):
        """Test RSI oversold must stay below overbought"""
        monkeypatch.setenv("ENGINE_RSI_LOW", "75")
        with pytest.raises(ValidationError) as exc_info:
            Settings()
        assert "ENGINE_RSI_LOW must be below ENGINE_RSI_HIGH" in str(exc_info.value)

    def test_hold_band_below_strong_cutoff(self, monkeypatch):
        """Test hold threshold must stay below the strong cutoff"""
        monkeypatch.setenv("ENGINE_HOLD_THRESHOLD", "0.7")
        with pytest.raises(ValidationError) as exc_info:
            Settings()
        assert "invalid engine thresholds" in str(exc_info.value).lower()

    def test_alternative_strong_cutoff(self, monkeypatch):
        """Test the 0.5 strong cutoff is accepted"""
        monkeypatch.setenv("ENGINE_STRONG_THRESHOLD", "0.5")
        settings = Settings()
        assert settings.ENGINE_STRONG_THRESHOLD == 0.5

    def test_log_level_normalized(self, monkeypatch):
        """Test LOG_LEVEL is uppercased and checked"""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings().LOG_LEVEL == "DEBUG"

        monkeypatch.setenv("LOG_LEVEL", "verbose")
        with pytest.raises(ValidationError):
            Settings()

    def test_sharpe_method_choices(self, monkeypatch):
        """Test ENGINE_SHARPE_METHOD only accepts known formulas"""
        monkeypatch.setenv("ENGINE_SHARPE_METHOD", "trade_returns")
        assert Settings().ENGINE_SHARPE_METHOD == "trade_returns"

        monkeypatch.setenv("ENGINE_SHARPE_METHOD", "calmar")
        with pytest.raises(ValidationError):
            Settings()

    def test_debug_auto_disabled_in_production(self, monkeypatch):
        """Test DEBUG is automatically disabled in production"""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("DEBUG", "true")  # Try to enable DEBUG

        settings = Settings()
        assert settings.ENVIRONMENT == "production"
        assert settings.DEBUG is False  # Should be forced to False


class TestScoringThresholds:
    """Test the engine threshold model"""

    def test_from_settings(self):
        """Test thresholds mirror the settings defaults"""
        thresholds = ScoringThresholds.from_settings()

        assert thresholds.rsi_low == 30.0
        assert thresholds.rsi_high == 70.0
        assert thresholds.band_proximity == 0.1
        assert thresholds.strength_cap == 0.95

    def test_inverted_levels_rejected(self):
        """Test rsi_low >= rsi_high is rejected"""
        with pytest.raises(ValidationError):
            ScoringThresholds(rsi_low=80.0, rsi_high=70.0)

    def test_frozen(self):
        """Test thresholds cannot be mutated"""
        thresholds = ScoringThresholds()
        with pytest.raises(ValidationError):
            thresholds.rsi_low = 10.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
