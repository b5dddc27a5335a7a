"""
Pytest fixtures for spread recommender tests.
"""

from datetime import date

import pytest

from spread_recommender.discovery import make_candidate_id
from spread_recommender.models import (
    FutureQuote,
    OptionQuote,
    StrategyCandidate,
    StrategyMetrics,
)

# 2025-09-09 is 100 days after 2025-06-01
AS_OF = date(2025, 6, 1)
EXPIRATION_100D = "20250909"
EXPIRATION_105D = "20250914"


def quote(expiration: str, strike: float, mid: float) -> OptionQuote:
    return OptionQuote(
        expiration=expiration,
        strike=float(strike),
        bid=round(max(mid - 0.05, 0.0), 4),
        ask=round(mid + 0.05, 4),
        mid_price=mid,
        last_price=mid,
    )


def future(expiration: str, mid: float) -> FutureQuote:
    return FutureQuote(
        expiration=expiration,
        symbol="VX",
        bid=mid - 0.05,
        ask=mid + 0.05,
        mid_price=mid,
        last_price=mid,
    )


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def make_quote():
    """Factory for option quotes with a symmetric 0.10 market."""
    return quote


@pytest.fixture
def make_future():
    """Factory for future quotes."""
    return future


@pytest.fixture
def scenario_quotes():
    """Strikes 18/20/22/25 with mids 0.20/0.80/1.10/1.60."""
    return [
        quote(EXPIRATION_100D, 18, 0.20),
        quote(EXPIRATION_100D, 20, 0.80),
        quote(EXPIRATION_100D, 22, 1.10),
        quote(EXPIRATION_100D, 25, 1.60),
    ]


@pytest.fixture
def scenario_grid(scenario_quotes):
    """Single-expiration grid, 100 days out, future at 20.0."""
    return {EXPIRATION_100D: scenario_quotes}


@pytest.fixture
def scenario_futures():
    return {EXPIRATION_100D: future(EXPIRATION_100D, 20.0)}


@pytest.fixture
def make_candidate():
    """Factory for candidates with a given score."""

    def _make(score: float, expiration: str = EXPIRATION_100D, sell: float = 20.0,
              buy: float = 22.0, dte: int = 100) -> StrategyCandidate:
        metrics = StrategyMetrics(
            max_profit=170.0,
            max_loss=30.0,
            profit_loss_ratio=5.67,
            break_even_point=buy - 0.30,
            win_rate=0.15,
            capital_efficiency=5.67,
            quarterly_return=1.0,
            annualized_return=2.0,
            expected_return=0.0,
            risk_adjusted_return=0.0,
            optimal_timing_bonus=0.93,
            time_adjusted_score=score,
        )
        return StrategyCandidate(
            id=make_candidate_id(expiration, sell, buy),
            expiration=expiration,
            days_to_expiration=dte,
            sell_strike=sell,
            buy_strike=buy,
            sell_price=0.80,
            buy_price=1.10,
            net_debit=0.30,
            future_price=20.0,
            quantity=100,
            metrics=metrics,
        )

    return _make


@pytest.fixture
def wide_grid():
    """
    Three expirations (40, 105 and 200 days out), strikes 15-30 in 0.5 steps.

    Put mids rise 0.30 per strike point, so every spread costs 30% of its
    width and produces far more than 50 candidates.
    """
    expirations = {"20250711": 40, EXPIRATION_105D: 105, "20251218": 200}
    strikes = [15 + 0.5 * i for i in range(31)]
    grid = {
        exp: [quote(exp, s, round(0.1 + 0.3 * (s - 15), 4)) for s in strikes]
        for exp in expirations
    }
    futures = {exp: future(exp, 20.0) for exp in expirations}
    return grid, futures
