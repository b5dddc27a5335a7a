"""
Debit Spread Strategy Recommender

Pairs put options of one expiration into debit spreads (sell near the future
price, buy a higher strike), scores them with a time-adjusted model that
favors a 90-120 day holding window, and ranks the results.

Usage as library:
    from spread_recommender import generate_strategies

    strategies = generate_strategies(price_grid, future_prices)
    for s in strategies[:5]:
        print(s.id, f"{s.metrics.time_adjusted_score:.3f}")

Usage as CLI:
    python -m spread_recommender options.csv futures.csv
    python -m spread_recommender options.json futures.json --top 10 --json
"""

from spread_recommender.config import EngineConfig, ScoringWeights, load_config
from spread_recommender.models import (
    OptionQuote,
    FutureQuote,
    StrategyMetrics,
    StrategyCandidate,
    PayoffScenario,
)
from spread_recommender.engine import generate_strategies, StrategyEngine, EngineResult
from spread_recommender.exceptions import SpreadRecommenderError, InvalidExpirationError

__version__ = "1.0.0"

__all__ = [
    "EngineConfig",
    "ScoringWeights",
    "load_config",
    "OptionQuote",
    "FutureQuote",
    "StrategyMetrics",
    "StrategyCandidate",
    "PayoffScenario",
    "generate_strategies",
    "StrategyEngine",
    "EngineResult",
    "SpreadRecommenderError",
    "InvalidExpirationError",
]
