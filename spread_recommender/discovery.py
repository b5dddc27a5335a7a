"""
Strategy discovery module for put debit spreads.

Enumerates sell/buy strike pairs for one expiration, computes their
metrics and drops pairs that violate the engine's risk constraints.
"""

import logging
from collections import Counter
from datetime import date
from typing import Iterator, Optional, Sequence

from spread_recommender.config import EngineConfig
from spread_recommender.expirations import days_to_expiration
from spread_recommender.metrics import calculate_strategy_metrics
from spread_recommender.models import (
    FutureQuote,
    OptionQuote,
    StrategyCandidate,
    StrategyMetrics,
    format_strike,
)

logger = logging.getLogger(__name__)

# Skip reasons, in the order they are checked
NEGATIVE_DEBIT = "negative_debit"
MAX_LOSS = "max_loss"
CAPITAL_EFFICIENCY = "capital_efficiency"
ANNUALIZED_RETURN = "annualized_return"
STRIKE_WIDTH = "strike_width"


def make_candidate_id(expiration: str, sell_strike: float, buy_strike: float) -> str:
    """Deterministic candidate id, e.g. "20250916_20_22.5"."""
    return f"{expiration}_{format_strike(sell_strike)}_{format_strike(buy_strike)}"


def calculate_average_spread(quotes: Sequence[OptionQuote]) -> float:
    """
    Average bid-ask spread over quotes with a two-sided market.

    Returns:
        Mean of ask - bid for quotes with bid > 0 and ask > 0, or 0.0
    """
    valid = [q for q in quotes if q.bid > 0 and q.ask > 0]
    if not valid:
        return 0.0
    return sum(q.spread for q in valid) / len(valid)


def select_sell_candidates(
    quotes: Sequence[OptionQuote],
    future_price: float,
    threshold: float,
) -> list[OptionQuote]:
    """
    Quotes near the money with a positive mid price.

    Args:
        quotes: Quotes sorted by strike
        future_price: Future mid price
        threshold: Maximum |strike - future_price|

    Returns:
        Sell-leg candidates, in strike order
    """
    return [
        q for q in quotes
        if abs(q.strike - future_price) <= threshold and q.mid_price > 0
    ]


def select_buy_candidates(
    quotes: Sequence[OptionQuote],
    sell_strike: float,
) -> list[OptionQuote]:
    """Quotes strictly above the sell strike with a positive mid price."""
    return [q for q in quotes if q.strike > sell_strike and q.mid_price > 0]


def generate_pairs(
    quotes: Sequence[OptionQuote],
    future_price: float,
    threshold: float,
) -> Iterator[tuple[OptionQuote, OptionQuote]]:
    """
    Generate (sell, buy) pairs with sell strike < buy strike.

    Yields:
        Tuples of (sell_quote, buy_quote)
    """
    for sell in select_sell_candidates(quotes, future_price, threshold):
        for buy in select_buy_candidates(quotes, sell.strike):
            yield (sell, buy)


def rejection_reason(
    sell_strike: float,
    buy_strike: float,
    metrics: StrategyMetrics,
    config: EngineConfig,
) -> Optional[str]:
    """
    Check a priced pair against the engine filters.

    Returns:
        Name of the first violated filter, or None if the pair passes
    """
    if metrics.max_loss > config.max_loss:
        return MAX_LOSS

    if metrics.capital_efficiency < config.min_capital_efficiency:
        return CAPITAL_EFFICIENCY

    if metrics.annualized_return < config.min_annualized_return:
        return ANNUALIZED_RETURN

    if buy_strike - sell_strike > config.max_strike_width:
        return STRIKE_WIDTH

    return None


def discover_strategies_for_expiration(
    expiration: str,
    quotes: Sequence[OptionQuote],
    future: FutureQuote,
    config: EngineConfig,
    as_of: Optional[date] = None,
) -> list[StrategyCandidate]:
    """
    Discover all viable debit spreads for one expiration.

    Args:
        expiration: Expiration code (YYYYMMDD)
        quotes: Option quotes of this expiration, in any order
        future: Future quote of this expiration
        config: Configuration
        as_of: Date to count days from (default: today)

    Returns:
        Candidates that pass every filter, in generation order

    Raises:
        InvalidExpirationError: If the expiration code is malformed
    """
    dte = days_to_expiration(expiration, as_of)
    future_mid = future.mid_price
    sorted_quotes = sorted(quotes, key=lambda q: q.strike)

    logger.debug(
        f"Processing {expiration} ({dte} DTE, future {future_mid:.2f}, "
        f"{len(sorted_quotes)} quotes, avg spread "
        f"{calculate_average_spread(sorted_quotes):.3f})"
    )

    candidates = []
    skip_reasons: Counter = Counter()

    for sell, buy in generate_pairs(sorted_quotes, future_mid, config.sell_strike_threshold):
        net_debit = buy.mid_price - sell.mid_price

        if net_debit <= 0:
            skip_reasons[NEGATIVE_DEBIT] += 1
            continue

        metrics = calculate_strategy_metrics(
            sell.strike,
            buy.strike,
            net_debit,
            future_mid,
            dte,
            quantity=config.quantity,
            weights=config.weights,
        )

        reason = rejection_reason(sell.strike, buy.strike, metrics, config)
        if reason is not None:
            skip_reasons[reason] += 1
            continue

        candidate = StrategyCandidate(
            id=make_candidate_id(expiration, sell.strike, buy.strike),
            expiration=expiration,
            days_to_expiration=dte,
            sell_strike=sell.strike,
            buy_strike=buy.strike,
            sell_price=sell.mid_price,
            buy_price=buy.mid_price,
            net_debit=net_debit,
            future_price=future_mid,
            quantity=config.quantity,
            metrics=metrics,
        )
        candidates.append(candidate)

        if len(candidates) <= 3:
            logger.debug(f"  {candidate.summary()}")

    logger.debug(f"{expiration}: {len(candidates)} pairs generated")
    for reason, count in skip_reasons.items():
        logger.debug(f"  Skipped {count} pairs due to: {reason}")

    return candidates
