"""
Profit/loss analysis at expiration.

Covers single put positions, combined multi-position matrices and the
payoff regions of a debit spread candidate.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from spread_recommender.models import (
    PayoffScenario,
    Position,
    ProfitAnalysis,
    ProfitMatrix,
    ProfitScenario,
    StrategyCandidate,
)

logger = logging.getLogger(__name__)

# Scenario range padding around the selected strikes
SCENARIO_PADDING = 10
MIN_SCENARIO_PRICE = 1


def calculate_put_pl(strike: float, premium: float, quantity: int, price: float) -> float:
    """
    P/L of a put position at expiration.

    Args:
        strike: Put strike
        premium: Premium per unit paid (long) or received (short)
        quantity: Positive for long, negative for short
        price: Future settlement price

    Returns:
        Profit/loss in premium units times quantity
    """
    intrinsic = max(0.0, strike - price)

    if quantity > 0:
        return (intrinsic - premium) * quantity

    size = abs(quantity)
    return (premium - intrinsic) * size


def scenario_prices(scenario_min: float, scenario_max: float, step: float = 1) -> list[float]:
    """
    Settlement prices from scenario_min to scenario_max inclusive.

    Raises:
        ValueError: If step is not positive or the range is inverted
    """
    if step <= 0:
        raise ValueError("step must be positive")
    if scenario_max < scenario_min:
        raise ValueError("scenario_max must be >= scenario_min")

    prices = np.arange(scenario_min, scenario_max + step / 2, step)
    return [round(float(p), 10) for p in prices]


def calculate_profit_scenarios(
    strike: float,
    premium: float,
    quantity: int,
    scenario_min: float,
    scenario_max: float,
    step: float = 1,
) -> list[ProfitScenario]:
    """
    P/L of one put position over a range of settlement prices.
    """
    return [
        ProfitScenario(future_price=p, profit=calculate_put_pl(strike, premium, quantity, p))
        for p in scenario_prices(scenario_min, scenario_max, step)
    ]


def find_break_even_point(scenarios: Sequence[ProfitScenario]) -> Optional[float]:
    """
    Locate the first sign change of P/L by linear interpolation.

    Returns:
        Interpolated break-even price, or None if P/L never changes sign
    """
    for current, nxt in zip(scenarios, scenarios[1:]):
        crosses_up = current.profit <= 0 < nxt.profit
        crosses_down = current.profit > 0 >= nxt.profit
        if crosses_up or crosses_down:
            span = abs(current.profit) + abs(nxt.profit)
            ratio = abs(current.profit) / span if span > 0 else 0.0
            return current.future_price + (nxt.future_price - current.future_price) * ratio
    return None


def analyze_profit(scenarios: Sequence[ProfitScenario]) -> ProfitAnalysis:
    """
    Summarize a scenario sweep: break-even, extremes and profitable range.

    Raises:
        ValueError: If scenarios is empty
    """
    if not scenarios:
        raise ValueError("scenarios must not be empty")

    profits = [s.profit for s in scenarios]
    profitable = [s.future_price for s in scenarios if s.profit > 0]

    return ProfitAnalysis(
        break_even_point=find_break_even_point(scenarios),
        max_profit=max(profits),
        max_loss=min(profits),
        profitable_min=profitable[0] if profitable else None,
        profitable_max=profitable[-1] if profitable else None,
    )


def build_profit_matrix(
    positions: Sequence[Position],
    scenario_min: Optional[float] = None,
    scenario_max: Optional[float] = None,
    step: float = 1,
) -> ProfitMatrix:
    """
    Combined P/L of several put positions over a price range.

    The default range runs from the lowest strike minus 10 (at least 1) to the
    highest strike plus 10.

    Raises:
        ValueError: If no positions are given
    """
    if not positions:
        raise ValueError("positions must not be empty")

    strikes = [p.strike for p in positions]
    if scenario_min is None:
        scenario_min = max(MIN_SCENARIO_PRICE, min(strikes) - SCENARIO_PADDING)
    if scenario_max is None:
        scenario_max = max(strikes) + SCENARIO_PADDING

    prices = scenario_prices(scenario_min, scenario_max, step)

    matrix = []
    totals = []
    for price in prices:
        row = [calculate_put_pl(p.strike, p.price, p.quantity, price) for p in positions]
        matrix.append(row)
        totals.append(sum(row))

    logger.debug(f"Built profit matrix: {len(prices)} prices x {len(positions)} positions")

    return ProfitMatrix(
        future_prices=prices,
        positions=list(positions),
        matrix=matrix,
        total_profits=totals,
    )


def calculate_spread_pl_at_expiration(candidate: StrategyCandidate, price: float) -> float:
    """
    P/L of a debit spread candidate at expiration, per lot.

    Long put at the buy strike, short put at the sell strike.
    """
    long_put_value = max(0.0, candidate.buy_strike - price)
    short_put_value = max(0.0, candidate.sell_strike - price)
    return (long_put_value - short_put_value - candidate.net_debit) * candidate.quantity


def get_payoff_table(candidate: StrategyCandidate) -> list[PayoffScenario]:
    """
    Payoff by settlement region.

    Returns list of PayoffScenario objects for:
    1. At or below the sell strike (max profit)
    2. Between the strikes, reported at the break-even point
    3. At or above the buy strike (max loss)
    """
    m = candidate.metrics
    sell = candidate.sell_strike
    buy = candidate.buy_strike

    return [
        PayoffScenario(
            scenario_name="Below Sell Strike",
            price_condition=f"Price <= {sell:.2f}",
            profit_loss=m.max_profit,
            is_max_profit=True,
        ),
        PayoffScenario(
            scenario_name="Between Strikes",
            price_condition=f"{sell:.2f} < Price < {buy:.2f} (break-even {m.break_even_point:.2f})",
            profit_loss=calculate_spread_pl_at_expiration(candidate, m.break_even_point),
        ),
        PayoffScenario(
            scenario_name="Above Buy Strike",
            price_condition=f"Price >= {buy:.2f}",
            profit_loss=-m.max_loss,
            is_max_loss=True,
        ),
    ]
