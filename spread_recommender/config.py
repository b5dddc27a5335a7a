"""
Configuration classes for the debit-spread strategy recommender.

Module-level constants are the reference values of the engine. ``EngineConfig``
defaults to them, so an engine run without a config reproduces them exactly.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from spread_recommender.exceptions import ConfigurationError

# Contract multiplier applied to every per-share price
CONTRACT_MULTIPLIER = 100

# Sell leg must sit within this many strike units of the future mid price
SELL_STRIKE_THRESHOLD = 1.5

# Filter thresholds
MAX_LOSS_LIMIT = 5000.0
MIN_CAPITAL_EFFICIENCY = 0.1
MIN_ANNUALIZED_RETURN = 0.05
MAX_STRIKE_WIDTH = 10.0

# Number of candidates returned after ranking
TOP_N = 50


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights of the time-adjusted score.

    All weights should sum to 1.0 for normalized final scores.
    """
    risk_adjusted_weight: float = 0.2
    quarterly_return_weight: float = 0.3
    timing_weight: float = 0.5

    def __post_init__(self) -> None:
        total = (
            self.risk_adjusted_weight
            + self.quarterly_return_weight
            + self.timing_weight
        )
        if abs(total - 1.0) > 0.001:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.4f}")

    def validate(self) -> bool:
        """Validate all weights are non-negative."""
        return all(
            w >= 0
            for w in [
                self.risk_adjusted_weight,
                self.quarterly_return_weight,
                self.timing_weight,
            ]
        )


@dataclass
class EngineConfig:
    """
    Configuration for the strategy engine.

    Attributes:
        sell_strike_threshold: Max distance of the sell strike from the future mid (default: 1.5)
        quantity: Contract multiplier (default: 100)
        max_loss: Discard candidates losing more than this per lot (default: 5000)
        min_capital_efficiency: Minimum max_profit / max_loss (default: 0.1)
        min_annualized_return: Minimum annualized return (default: 0.05)
        max_strike_width: Maximum buy - sell strike distance (default: 10)
        top_n: Number of ranked candidates to return (default: 50)
        weights: Time-adjusted score weights
    """
    sell_strike_threshold: float = SELL_STRIKE_THRESHOLD
    quantity: int = CONTRACT_MULTIPLIER
    max_loss: float = MAX_LOSS_LIMIT
    min_capital_efficiency: float = MIN_CAPITAL_EFFICIENCY
    min_annualized_return: float = MIN_ANNUALIZED_RETURN
    max_strike_width: float = MAX_STRIKE_WIDTH
    top_n: int = TOP_N
    weights: ScoringWeights = field(default_factory=ScoringWeights)

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Validate configuration parameters."""
        if self.sell_strike_threshold < 0:
            raise ValueError("sell_strike_threshold must be non-negative")
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1")
        if self.max_loss <= 0:
            raise ValueError("max_loss must be positive")
        if self.max_strike_width <= 0:
            raise ValueError("max_strike_width must be positive")
        if self.top_n < 1:
            raise ValueError("top_n must be at least 1")
        if not self.weights.validate():
            raise ValueError("weights must be non-negative")


def config_from_dict(data: dict[str, Any]) -> EngineConfig:
    """
    Build an EngineConfig from a plain mapping.

    Args:
        data: Mapping of EngineConfig field names, with an optional nested
            ``weights`` mapping of ScoringWeights field names

    Returns:
        Validated EngineConfig

    Raises:
        ConfigurationError: On unknown keys or invalid values
    """
    allowed = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

    values = dict(data)
    weights_data = values.pop("weights", None)

    try:
        if weights_data is not None:
            if not isinstance(weights_data, dict):
                raise ConfigurationError("'weights' must be a mapping")
            weight_fields = {f.name for f in fields(ScoringWeights)}
            unknown_weights = sorted(set(weights_data) - weight_fields)
            if unknown_weights:
                raise ConfigurationError(
                    f"Unknown weight keys: {', '.join(unknown_weights)}"
                )
            values["weights"] = ScoringWeights(**weights_data)
        return EngineConfig(**values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(str(e)) from e


def load_config(path: Optional[Union[str, Path]]) -> EngineConfig:
    """
    Load an EngineConfig from a YAML file.

    An empty or missing path returns the default configuration.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if path is None:
        return EngineConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML: {e}") from e

    if data is None:
        return EngineConfig()
    if not isinstance(data, dict):
        raise ConfigurationError("Config root must be a mapping")

    return config_from_dict(data)
