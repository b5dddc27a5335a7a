"""
Strategy engine for put debit spreads.

Provides both a class-based API and a simple function interface. The engine
performs no I/O and keeps no state between calls.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional, Sequence

from spread_recommender.config import EngineConfig
from spread_recommender.discovery import discover_strategies_for_expiration
from spread_recommender.models import FutureQuote, OptionQuote, StrategyCandidate
from spread_recommender.ranking import (
    format_csv_output,
    format_ranking_report,
    rank_strategies,
)

logger = logging.getLogger(__name__)

PriceGrid = Mapping[str, Sequence[OptionQuote]]
FuturePrices = Mapping[str, FutureQuote]


@dataclass
class EngineResult:
    """Result from one engine run."""

    strategies: list[StrategyCandidate]
    total_candidates: int
    expirations_scanned: list[str]
    expirations_skipped: list[str]

    def to_report(self) -> str:
        """Generate human-readable report."""
        return format_ranking_report(self.strategies)

    def to_csv(self) -> str:
        """Generate CSV output."""
        return format_csv_output(self.strategies)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "total_candidates": self.total_candidates,
            "expirations_scanned": list(self.expirations_scanned),
            "expirations_skipped": list(self.expirations_skipped),
            "strategies": [s.to_dict() for s in self.strategies],
        }


@dataclass
class StrategyEngine:
    """
    Recommend put debit spreads from a price grid and future prices.

    Example usage:
        engine = StrategyEngine()
        result = engine.run(price_grid, future_prices)
        print(result.to_report())
    """

    config: EngineConfig = field(default_factory=EngineConfig)

    def run(
        self,
        price_grid: PriceGrid,
        future_prices: FuturePrices,
        as_of: Optional[date] = None,
    ) -> EngineResult:
        """
        Generate, filter and rank candidates across all expirations.

        Args:
            price_grid: Expiration code -> option quotes
            future_prices: Expiration code -> future quote
            as_of: Date to count days to expiration from (default: today)

        Returns:
            EngineResult with ranked strategies

        Raises:
            InvalidExpirationError: If a priced expiration code is malformed
        """
        if as_of is None:
            as_of = date.today()

        all_candidates: list[StrategyCandidate] = []
        scanned: list[str] = []
        skipped: list[str] = []

        for expiration, quotes in price_grid.items():
            future = future_prices.get(expiration)
            if future is None:
                logger.info(f"{expiration}: no future price, skipping")
                skipped.append(expiration)
                continue

            scanned.append(expiration)
            all_candidates.extend(
                discover_strategies_for_expiration(
                    expiration, quotes, future, self.config, as_of
                )
            )

        logger.info(
            f"Total candidates: {len(all_candidates)} "
            f"from {len(scanned)} expirations ({len(skipped)} skipped)"
        )

        ranked = rank_strategies(all_candidates, top_n=self.config.top_n)

        return EngineResult(
            strategies=ranked,
            total_candidates=len(all_candidates),
            expirations_scanned=scanned,
            expirations_skipped=skipped,
        )


def generate_strategies(
    price_grid: PriceGrid,
    future_prices: FuturePrices,
    as_of: Optional[date] = None,
    config: Optional[EngineConfig] = None,
) -> list[StrategyCandidate]:
    """
    Simple function interface to the strategy engine.

    Args:
        price_grid: Expiration code (YYYYMMDD) -> option quotes
        future_prices: Expiration code -> future quote
        as_of: Date to count days to expiration from (default: today)
        config: Engine configuration (default thresholds if None)

    Returns:
        At most 50 candidates, sorted by time-adjusted score descending.
        An empty list means no viable strategy.

    Example:
        from spread_recommender import generate_strategies

        for s in generate_strategies(grid, futures):
            print(s.id, s.metrics.time_adjusted_score)
    """
    if config is None:
        config = EngineConfig()

    return StrategyEngine(config=config).run(price_grid, future_prices, as_of).strategies
