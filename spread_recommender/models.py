"""
Data models for the debit-spread strategy recommender.
"""

from dataclasses import dataclass
from typing import Optional


def format_strike(strike: float) -> str:
    """Strike as text without trailing zeros, e.g. "22" or "22.5"."""
    value = float(strike)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class OptionQuote:
    """
    Close/mid quote of a single put option in a price grid.

    Attributes:
        expiration: Expiration code (YYYYMMDD)
        strike: Strike price
        bid: Bid price
        ask: Ask price
        mid_price: Mid price
        last_price: Last traded price
        volume: Trading volume
        implied_volatility: Implied volatility (0-1 scale)
        delta, gamma, theta, vega: Option greeks
    """
    expiration: str
    strike: float
    bid: float
    ask: float
    mid_price: float
    last_price: float
    volume: Optional[int] = None
    implied_volatility: Optional[float] = None
    delta: Optional[float] = None
    gamma: Optional[float] = None
    theta: Optional[float] = None
    vega: Optional[float] = None

    @property
    def spread(self) -> float:
        """Bid-ask spread width."""
        return self.ask - self.bid


@dataclass(frozen=True)
class FutureQuote:
    """Quote of the underlying future for one expiration."""
    expiration: str
    symbol: str
    bid: float
    ask: float
    mid_price: float
    last_price: float
    volume: Optional[int] = None


@dataclass(frozen=True)
class StrategyMetrics:
    """
    Risk/reward metrics of a debit spread.

    ``profit_loss_ratio`` and ``capital_efficiency`` share one formula; both
    names are part of the output shape.
    """
    max_profit: float
    max_loss: float
    profit_loss_ratio: float
    break_even_point: float
    win_rate: float
    capital_efficiency: float
    quarterly_return: float
    annualized_return: float
    expected_return: float
    risk_adjusted_return: float
    optimal_timing_bonus: float
    time_adjusted_score: float

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "max_profit": round(self.max_profit, 2),
            "max_loss": round(self.max_loss, 2),
            "profit_loss_ratio": round(self.profit_loss_ratio, 4),
            "break_even_point": round(self.break_even_point, 4),
            "win_rate": round(self.win_rate, 4),
            "capital_efficiency": round(self.capital_efficiency, 4),
            "quarterly_return": round(self.quarterly_return, 4),
            "annualized_return": round(self.annualized_return, 4),
            "expected_return": round(self.expected_return, 2),
            "risk_adjusted_return": round(self.risk_adjusted_return, 4),
            "optimal_timing_bonus": round(self.optimal_timing_bonus, 4),
            "time_adjusted_score": round(self.time_adjusted_score, 4),
        }


@dataclass(frozen=True)
class StrategyCandidate:
    """
    Put debit spread: sell the near-the-money strike, buy a higher strike.

    Structure:
    - Short Put (sell_strike, near the future price) - hedge
    - Long Put (buy_strike, higher) - main profit leg on a decline
    """
    id: str
    expiration: str
    days_to_expiration: int
    sell_strike: float
    buy_strike: float
    sell_price: float
    buy_price: float
    net_debit: float
    future_price: float
    quantity: int
    metrics: StrategyMetrics

    @property
    def strike_width(self) -> float:
        """Distance between the two strikes."""
        return self.buy_strike - self.sell_strike

    @property
    def time_adjusted_score(self) -> float:
        """Convenience accessor for the ranking key."""
        return self.metrics.time_adjusted_score

    def summary(self) -> str:
        """Return a one-line human-readable description of the trade."""
        return (
            f"SELL {format_strike(self.sell_strike)}P({self.sell_price:.2f}) / "
            f"BUY {format_strike(self.buy_strike)}P({self.buy_price:.2f}) = "
            f"debit {self.net_debit:.2f} / max profit {self.metrics.max_profit:.0f}"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "expiration": self.expiration,
            "days_to_expiration": self.days_to_expiration,
            "sell_strike": self.sell_strike,
            "buy_strike": self.buy_strike,
            "sell_price": round(self.sell_price, 4),
            "buy_price": round(self.buy_price, 4),
            "net_debit": round(self.net_debit, 4),
            "future_price": round(self.future_price, 4),
            "quantity": self.quantity,
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class PayoffScenario:
    """
    Payoff of a spread over one region of settlement prices.

    Attributes:
        scenario_name: Description of the scenario
        price_condition: Price condition description
        profit_loss: P/L at this scenario (or at the region's upper bound)
        is_max_profit: Whether this is a max profit scenario
        is_max_loss: Whether this is a max loss scenario
    """
    scenario_name: str
    price_condition: str
    profit_loss: float
    is_max_profit: bool = False
    is_max_loss: bool = False


@dataclass
class ProfitScenario:
    """P/L of a position at one settlement price of the future."""
    future_price: float
    profit: float


@dataclass
class ProfitAnalysis:
    """Summary of a profit scenario sweep."""
    break_even_point: Optional[float]
    max_profit: float
    max_loss: float
    profitable_min: Optional[float]
    profitable_max: Optional[float]


@dataclass
class Position:
    """
    A single put position selected for combined P/L analysis.

    Positive quantity is long, negative quantity is short.
    """
    expiration: str
    strike: float
    price: float
    quantity: int

    @property
    def id(self) -> str:
        return f"{self.expiration}_{format_strike(self.strike)}"


@dataclass
class ProfitMatrix:
    """Per-position and total P/L over a range of future prices."""
    future_prices: list[float]
    positions: list[Position]
    matrix: list[list[float]]  # [price_index][position_index]
    total_profits: list[float]  # [price_index]
