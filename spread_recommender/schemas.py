"""Pydantic models for the JSON shape of price grids and future prices."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from spread_recommender.models import FutureQuote, OptionQuote


class OptionQuoteSchema(BaseModel):
    """Option quote as exchanged with the dashboard (camelCase accepted)."""

    model_config = ConfigDict(populate_by_name=True)

    expiration: Optional[str] = None
    strike: float = Field(..., gt=0)
    bid: float = 0.0
    ask: float = 0.0
    mid_price: float = Field(..., alias="midPrice")
    last_price: float = Field(default=0.0, alias="lastPrice")
    volume: Optional[int] = None
    implied_volatility: Optional[float] = Field(default=None, alias="impliedVolatility")
    delta: Optional[float] = None
    gamma: Optional[float] = None
    theta: Optional[float] = None
    vega: Optional[float] = None

    def to_quote(self, expiration: str) -> OptionQuote:
        """Convert to an OptionQuote, defaulting the expiration to the grid key."""
        return OptionQuote(
            expiration=self.expiration or expiration,
            strike=self.strike,
            bid=self.bid,
            ask=self.ask,
            mid_price=self.mid_price,
            last_price=self.last_price,
            volume=self.volume,
            implied_volatility=self.implied_volatility,
            delta=self.delta,
            gamma=self.gamma,
            theta=self.theta,
            vega=self.vega,
        )


class FutureQuoteSchema(BaseModel):
    """Future quote as exchanged with the dashboard (camelCase accepted)."""

    model_config = ConfigDict(populate_by_name=True)

    expiration: Optional[str] = None
    symbol: str = ""
    bid: float = 0.0
    ask: float = 0.0
    mid_price: float = Field(..., alias="midPrice")
    last_price: float = Field(default=0.0, alias="lastPrice")
    volume: Optional[int] = None

    def to_quote(self, expiration: str) -> FutureQuote:
        """Convert to a FutureQuote, defaulting the expiration to the map key."""
        return FutureQuote(
            expiration=self.expiration or expiration,
            symbol=self.symbol,
            bid=self.bid,
            ask=self.ask,
            mid_price=self.mid_price,
            last_price=self.last_price,
            volume=self.volume,
        )


class PriceGridPayload(BaseModel):
    """
    Multi-expiration price grid.

    ``expirations`` lists the codes in display order; when omitted the order
    of ``results`` is used.
    """

    expirations: Optional[List[str]] = None
    results: Dict[str, List[OptionQuoteSchema]]

    def to_price_grid(self) -> Dict[str, List[OptionQuote]]:
        """Convert to the engine's price grid mapping."""
        order = self.expirations if self.expirations is not None else list(self.results)
        return {
            exp: [q.to_quote(exp) for q in self.results.get(exp, [])]
            for exp in order
        }


FuturePricesAdapter = TypeAdapter(Dict[str, FutureQuoteSchema])
