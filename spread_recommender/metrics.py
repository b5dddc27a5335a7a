"""
Metrics and scoring for put debit spreads.

Heuristic, time-adjusted model that favors trades in the 90-120 day
holding window, then near-term capital return, then risk-adjusted
expectation.
"""

import logging
from typing import Optional

from spread_recommender.config import CONTRACT_MULTIPLIER, ScoringWeights
from spread_recommender.models import StrategyMetrics

logger = logging.getLogger(__name__)

# Win-rate model
LOW_WIN_RATE = 0.15
BASE_WIN_RATE = 0.55
MAX_WIN_RATE_BOOST = 0.3
MIN_WIN_RATE = 0.10
MAX_WIN_RATE = 0.90
BASE_VOLATILITY = 0.25
VOLATILITY_PER_YEAR = 0.15

# Return normalization
QUARTER_DAYS = 91
YEAR_DAYS = 365
MAX_QUARTERLY_RETURN = 1.0
MAX_ANNUALIZED_RETURN = 2.0

# Holding window
OPTIMAL_MIN_DAYS = 90
OPTIMAL_MAX_DAYS = 120
OPTIMAL_PEAK_DAYS = 105
OPTIMAL_MIN_BONUS = 0.8
OPTIMAL_MAX_BONUS = 1.0
NEAR_DATED_DAYS = 30
NEAR_DATED_BONUS = 0.01
SHORT_DATED_MIN_BONUS = 0.1
SHORT_DATED_MAX_BONUS = 0.4
LONG_DATED_BONUS = 0.8
LONG_DATED_MIN_BONUS = 0.4
LONG_DATED_DECAY_DAYS = 120


def _safe_divide(numerator: float, denominator: float) -> float:
    """Divide, resolving a zero denominator to 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def calculate_win_rate(
    future_price: float,
    break_even_point: float,
    days_to_expiration: int,
) -> float:
    """
    Estimate the probability that the spread finishes profitable.

    The strategy bets on the underlying declining below the break-even point.
    Longer-dated trades get a wider volatility band, so the same cushion
    counts for less.

    Args:
        future_price: Current future mid price
        break_even_point: Spread break-even at expiration
        days_to_expiration: Days until expiration

    Returns:
        Win rate in [0.10, 0.90]
    """
    if future_price <= break_even_point:
        return LOW_WIN_RATE

    price_diff = future_price - break_even_point
    vol_factor = BASE_VOLATILITY + (days_to_expiration / YEAR_DAYS) * VOLATILITY_PER_YEAR
    denominator = future_price * vol_factor
    ratio = _safe_divide(price_diff, denominator)

    win_rate = BASE_WIN_RATE + min(MAX_WIN_RATE_BOOST, ratio)
    return max(MIN_WIN_RATE, min(MAX_WIN_RATE, win_rate))


def calculate_optimal_timing_bonus(days_to_expiration: int) -> float:
    """
    Reward days-to-expiration inside the 90-120 day holding window.

    - 90 to 120 days: 0.8 at the edges rising linearly to 1.0 at day 105
    - under 30 days: 0.01
    - 30 to 89 days: days/90 * 0.4, floored at 0.1
    - over 120 days: decays from 0.8 toward 0.4
    """
    days = days_to_expiration

    if OPTIMAL_MIN_DAYS <= days <= OPTIMAL_MAX_DAYS:
        half_window = OPTIMAL_PEAK_DAYS - OPTIMAL_MIN_DAYS
        distance = abs(days - OPTIMAL_PEAK_DAYS) / half_window
        return OPTIMAL_MAX_BONUS - distance * (OPTIMAL_MAX_BONUS - OPTIMAL_MIN_BONUS)

    if days < OPTIMAL_MIN_DAYS:
        if days < NEAR_DATED_DAYS:
            return NEAR_DATED_BONUS
        return max(SHORT_DATED_MIN_BONUS, (days / OPTIMAL_MIN_DAYS) * SHORT_DATED_MAX_BONUS)

    decay = min(
        LONG_DATED_BONUS - LONG_DATED_MIN_BONUS,
        (days - OPTIMAL_MAX_DAYS) / LONG_DATED_DECAY_DAYS,
    )
    return max(LONG_DATED_MIN_BONUS, LONG_DATED_BONUS - decay)


def calculate_quarterly_return(capital_efficiency: float, days_to_expiration: int) -> float:
    """Return normalized to a 91-day period, capped at 100%."""
    return min(
        MAX_QUARTERLY_RETURN,
        capital_efficiency * (QUARTER_DAYS / max(days_to_expiration, 1)),
    )


def calculate_annualized_return(capital_efficiency: float, days_to_expiration: int) -> float:
    """Return normalized to a 365-day year, capped at 200%."""
    return min(
        MAX_ANNUALIZED_RETURN,
        capital_efficiency * (YEAR_DAYS / max(days_to_expiration, 1)),
    )


def calculate_time_adjusted_score(
    risk_adjusted_return: float,
    quarterly_return: float,
    optimal_timing_bonus: float,
    weights: Optional[ScoringWeights] = None,
) -> float:
    """Weighted blend used as the single ranking key."""
    if weights is None:
        weights = ScoringWeights()

    return (
        risk_adjusted_return * weights.risk_adjusted_weight
        + quarterly_return * weights.quarterly_return_weight
        + optimal_timing_bonus * weights.timing_weight
    )


def calculate_strategy_metrics(
    sell_strike: float,
    buy_strike: float,
    net_debit: float,
    future_price: float,
    days_to_expiration: int,
    quantity: int = CONTRACT_MULTIPLIER,
    weights: Optional[ScoringWeights] = None,
) -> StrategyMetrics:
    """
    Calculate all metrics of a put debit spread.

    Max profit is reached when the underlying settles at or below the sell
    strike; max loss is the debit paid.

    Args:
        sell_strike: Short put strike (lower)
        buy_strike: Long put strike (higher)
        net_debit: Buy premium minus sell premium, per share
        future_price: Current future mid price
        days_to_expiration: Days until expiration
        quantity: Contract multiplier
        weights: Score weights (uses defaults if None)

    Returns:
        StrategyMetrics for the spread
    """
    max_profit = (buy_strike - sell_strike - net_debit) * quantity
    max_loss = net_debit * quantity

    profit_loss_ratio = _safe_divide(max_profit, max_loss)
    capital_efficiency = _safe_divide(max_profit, max_loss)
    break_even_point = buy_strike - net_debit

    win_rate = calculate_win_rate(future_price, break_even_point, days_to_expiration)
    quarterly_return = calculate_quarterly_return(capital_efficiency, days_to_expiration)
    annualized_return = calculate_annualized_return(capital_efficiency, days_to_expiration)
    optimal_timing_bonus = calculate_optimal_timing_bonus(days_to_expiration)

    expected_return = max_profit * win_rate - max_loss * (1 - win_rate)
    risk_adjusted_return = _safe_divide(expected_return, max_loss)

    time_adjusted_score = calculate_time_adjusted_score(
        risk_adjusted_return, quarterly_return, optimal_timing_bonus, weights
    )

    return StrategyMetrics(
        max_profit=max_profit,
        max_loss=max_loss,
        profit_loss_ratio=profit_loss_ratio,
        break_even_point=break_even_point,
        win_rate=win_rate,
        capital_efficiency=capital_efficiency,
        quarterly_return=quarterly_return,
        annualized_return=annualized_return,
        expected_return=expected_return,
        risk_adjusted_return=risk_adjusted_return,
        optimal_timing_bonus=optimal_timing_bonus,
        time_adjusted_score=time_adjusted_score,
    )
