"""Tests for configuration classes."""

import pytest

from spread_recommender.config import (
    CONTRACT_MULTIPLIER,
    MAX_LOSS_LIMIT,
    MAX_STRIKE_WIDTH,
    MIN_ANNUALIZED_RETURN,
    MIN_CAPITAL_EFFICIENCY,
    SELL_STRIKE_THRESHOLD,
    TOP_N,
    EngineConfig,
    ScoringWeights,
    config_from_dict,
    load_config,
)
from spread_recommender.exceptions import ConfigurationError


class TestEngineConfig:
    """Tests for EngineConfig dataclass."""

    def test_default_config(self):
        """Defaults are the engine's reference constants."""
        config = EngineConfig()

        assert config.sell_strike_threshold == SELL_STRIKE_THRESHOLD == 1.5
        assert config.quantity == CONTRACT_MULTIPLIER == 100
        assert config.max_loss == MAX_LOSS_LIMIT == 5000
        assert config.min_capital_efficiency == MIN_CAPITAL_EFFICIENCY == 0.1
        assert config.min_annualized_return == MIN_ANNUALIZED_RETURN == 0.05
        assert config.max_strike_width == MAX_STRIKE_WIDTH == 10
        assert config.top_n == TOP_N == 50

    def test_custom_config(self):
        config = EngineConfig(max_loss=3000, max_strike_width=8, top_n=10)

        assert config.max_loss == 3000
        assert config.max_strike_width == 8
        assert config.top_n == 10

    def test_invalid_top_n(self):
        with pytest.raises(ValueError, match="top_n must be at least 1"):
            EngineConfig(top_n=0)

    def test_invalid_quantity(self):
        with pytest.raises(ValueError, match="quantity must be at least 1"):
            EngineConfig(quantity=0)

    def test_invalid_threshold(self):
        with pytest.raises(ValueError, match="sell_strike_threshold must be non-negative"):
            EngineConfig(sell_strike_threshold=-1)

    def test_invalid_max_loss(self):
        with pytest.raises(ValueError, match="max_loss must be positive"):
            EngineConfig(max_loss=0)


class TestScoringWeights:
    """Tests for ScoringWeights dataclass."""

    def test_default_weights(self):
        weights = ScoringWeights()

        assert weights.risk_adjusted_weight == 0.2
        assert weights.quarterly_return_weight == 0.3
        assert weights.timing_weight == 0.5
        assert weights.validate()

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="must sum to 1.0"):
            ScoringWeights(risk_adjusted_weight=0.5)

    def test_negative_weight_rejected_by_config(self):
        weights = ScoringWeights(
            risk_adjusted_weight=-0.2,
            quarterly_return_weight=0.7,
            timing_weight=0.5,
        )
        assert not weights.validate()
        with pytest.raises(ValueError, match="weights must be non-negative"):
            EngineConfig(weights=weights)

    def test_frozen(self):
        weights = ScoringWeights()
        with pytest.raises(Exception):
            weights.timing_weight = 0.9


class TestConfigFromDict:
    """Tests for config_from_dict function."""

    def test_values_and_weights(self):
        config = config_from_dict({
            "max_loss": 3000,
            "weights": {
                "risk_adjusted_weight": 0.1,
                "quarterly_return_weight": 0.3,
                "timing_weight": 0.6,
            },
        })

        assert config.max_loss == 3000
        assert config.weights.timing_weight == 0.6

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="Unknown config keys: bogus"):
            config_from_dict({"bogus": 1})

    def test_unknown_weight_key(self):
        with pytest.raises(ConfigurationError, match="Unknown weight keys"):
            config_from_dict({"weights": {"vega_weight": 1.0}})

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError, match="top_n must be at least 1"):
            config_from_dict({"top_n": 0})

    def test_weights_not_mapping(self):
        with pytest.raises(ConfigurationError, match="'weights' must be a mapping"):
            config_from_dict({"weights": [0.2, 0.3, 0.5]})


class TestLoadConfig:
    """Tests for load_config function."""

    def test_none_returns_defaults(self):
        assert load_config(None) == EngineConfig()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text(
            "max_strike_width: 8\n"
            "top_n: 20\n"
            "weights:\n"
            "  risk_adjusted_weight: 0.3\n"
            "  quarterly_return_weight: 0.3\n"
            "  timing_weight: 0.4\n"
        )

        config = load_config(path)

        assert config.max_strike_width == 8
        assert config.top_n == 20
        assert config.weights.timing_weight == 0.4

    def test_empty_file_returns_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == EngineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Config file not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("top_n: [1, 2\n")
        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_config(path)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_config(path)
