"""Tests for strategy discovery module."""

import pytest

from spread_recommender.config import EngineConfig
from spread_recommender.discovery import (
    ANNUALIZED_RETURN,
    CAPITAL_EFFICIENCY,
    MAX_LOSS,
    STRIKE_WIDTH,
    calculate_average_spread,
    discover_strategies_for_expiration,
    generate_pairs,
    make_candidate_id,
    rejection_reason,
    select_buy_candidates,
    select_sell_candidates,
)
from spread_recommender.exceptions import InvalidExpirationError
from spread_recommender.metrics import calculate_strategy_metrics

EXP = "20250909"


@pytest.fixture
def config():
    return EngineConfig()


class TestMakeCandidateId:
    """Tests for make_candidate_id function."""

    def test_whole_strikes(self):
        assert make_candidate_id(EXP, 20.0, 22.0) == "20250909_20_22"

    def test_fractional_strikes(self):
        assert make_candidate_id(EXP, 19.5, 22.5) == "20250909_19.5_22.5"

    def test_large_strikes_keep_all_digits(self):
        assert make_candidate_id(EXP, 100000.0, 100000.5) == "20250909_100000_100000.5"
        assert make_candidate_id(EXP, 100000.0, 100000.4) == "20250909_100000_100000.4"
        assert make_candidate_id(EXP, 1000000.0, 1000001.0) == "20250909_1000000_1000001"


class TestCalculateAverageSpread:
    """Tests for calculate_average_spread function."""

    def test_average(self, make_quote):
        quotes = [make_quote(EXP, 20, 1.0), make_quote(EXP, 22, 2.0)]
        assert calculate_average_spread(quotes) == pytest.approx(0.10)

    def test_ignores_one_sided_quotes(self, make_quote):
        quotes = [make_quote(EXP, 20, 0.0), make_quote(EXP, 22, 2.0)]
        # mid 0.0 has bid 0
        assert calculate_average_spread(quotes) == pytest.approx(0.10)

    def test_empty(self):
        assert calculate_average_spread([]) == 0.0


class TestSelectSellCandidates:
    """Tests for select_sell_candidates function."""

    def test_within_threshold(self, scenario_quotes):
        sells = select_sell_candidates(scenario_quotes, 20.0, 1.5)
        assert [q.strike for q in sells] == [20.0]

    def test_threshold_is_inclusive(self, make_quote):
        quotes = [make_quote(EXP, 18.5, 0.5), make_quote(EXP, 21.5, 1.0), make_quote(EXP, 21.6, 1.1)]
        sells = select_sell_candidates(quotes, 20.0, 1.5)
        assert [q.strike for q in sells] == [18.5, 21.5]

    def test_requires_positive_mid(self, make_quote):
        quotes = [make_quote(EXP, 20, 0.0), make_quote(EXP, 21, 0.5)]
        sells = select_sell_candidates(quotes, 20.0, 1.5)
        assert [q.strike for q in sells] == [21.0]


class TestSelectBuyCandidates:
    """Tests for select_buy_candidates function."""

    def test_strictly_above_sell(self, scenario_quotes):
        buys = select_buy_candidates(scenario_quotes, 20.0)
        assert [q.strike for q in buys] == [22.0, 25.0]

    def test_requires_positive_mid(self, make_quote):
        quotes = [make_quote(EXP, 22, 0.0), make_quote(EXP, 25, 1.0)]
        assert [q.strike for q in select_buy_candidates(quotes, 20.0)] == [25.0]


class TestGeneratePairs:
    """Tests for generate_pairs function."""

    def test_pairs(self, scenario_quotes):
        pairs = list(generate_pairs(scenario_quotes, 20.0, 1.5))
        assert [(s.strike, b.strike) for s, b in pairs] == [(20.0, 22.0), (20.0, 25.0)]

    def test_sell_below_buy(self, wide_grid):
        grid, futures = wide_grid
        quotes = next(iter(grid.values()))
        for sell, buy in generate_pairs(quotes, 20.0, 1.5):
            assert sell.strike < buy.strike


class TestRejectionReason:
    """Tests for rejection_reason function."""

    def test_passes(self, config):
        m = calculate_strategy_metrics(20.0, 22.0, 0.30, 20.0, 100)
        assert rejection_reason(20.0, 22.0, m, config) is None

    def test_max_loss(self, config):
        m = calculate_strategy_metrics(20.0, 80.0, 51.0, 20.0, 100)
        assert m.max_loss == pytest.approx(5100.0)
        assert rejection_reason(20.0, 80.0, m, config) == MAX_LOSS

    def test_max_loss_boundary_passes(self, config):
        m = calculate_strategy_metrics(20.0, 30.0, 5.0, 20.0, 100, quantity=1000)
        assert m.max_loss == 5000.0
        assert rejection_reason(20.0, 30.0, m, config) is None

    def test_capital_efficiency(self, config):
        m = calculate_strategy_metrics(20.0, 21.0, 0.95, 20.0, 100)
        assert m.capital_efficiency < 0.1
        assert rejection_reason(20.0, 21.0, m, config) == CAPITAL_EFFICIENCY

    def test_annualized_return(self, config):
        # Efficiency exactly 0.1 but spread over 1000 days
        m = calculate_strategy_metrics(20.0, 22.75, 2.5, 20.0, 1000)
        assert m.capital_efficiency == pytest.approx(0.1)
        assert m.annualized_return < 0.05
        assert rejection_reason(20.0, 22.75, m, config) == ANNUALIZED_RETURN

    def test_strike_width(self, config):
        m = calculate_strategy_metrics(20.0, 31.0, 1.0, 20.0, 100)
        assert rejection_reason(20.0, 31.0, m, config) == STRIKE_WIDTH

    def test_strike_width_boundary_passes(self, config):
        m = calculate_strategy_metrics(20.0, 30.0, 1.0, 20.0, 100)
        assert rejection_reason(20.0, 30.0, m, config) is None

    def test_custom_thresholds(self):
        config = EngineConfig(max_strike_width=1.5)
        m = calculate_strategy_metrics(20.0, 22.0, 0.30, 20.0, 100)
        assert rejection_reason(20.0, 22.0, m, config) == STRIKE_WIDTH


class TestDiscoverStrategiesForExpiration:
    """Tests for discover_strategies_for_expiration function."""

    def test_scenario(self, scenario_quotes, make_future, config, as_of):
        candidates = discover_strategies_for_expiration(
            EXP, scenario_quotes, make_future(EXP, 20.0), config, as_of
        )

        assert [c.id for c in candidates] == ["20250909_20_22", "20250909_20_25"]

        first = candidates[0]
        assert first.days_to_expiration == 100
        assert first.sell_price == 0.80
        assert first.buy_price == 1.10
        assert first.net_debit == pytest.approx(0.30)
        assert first.future_price == 20.0
        assert first.quantity == 100
        assert first.metrics.max_profit == pytest.approx(170.0)
        assert first.metrics.max_loss == pytest.approx(30.0)

    def test_negative_debits_rejected(self, make_quote, make_future, config, as_of):
        """Falling put prices never produce a net debit."""
        quotes = [
            make_quote(EXP, 18, 1.50),
            make_quote(EXP, 19, 1.00),
            make_quote(EXP, 20, 0.80),
            make_quote(EXP, 22, 0.40),
            make_quote(EXP, 25, 0.15),
        ]
        candidates = discover_strategies_for_expiration(
            EXP, quotes, make_future(EXP, 20.0), config, as_of
        )
        assert candidates == []

    def test_unsorted_input_not_mutated(self, scenario_quotes, make_future, config, as_of):
        shuffled = [scenario_quotes[3], scenario_quotes[0], scenario_quotes[2], scenario_quotes[1]]
        before = list(shuffled)

        candidates = discover_strategies_for_expiration(
            EXP, shuffled, make_future(EXP, 20.0), config, as_of
        )

        assert shuffled == before
        assert [c.id for c in candidates] == ["20250909_20_22", "20250909_20_25"]

    def test_quantity_from_config(self, scenario_quotes, make_future, as_of):
        config = EngineConfig(quantity=10)
        candidates = discover_strategies_for_expiration(
            EXP, scenario_quotes, make_future(EXP, 20.0), config, as_of
        )
        assert candidates[0].quantity == 10
        assert candidates[0].metrics.max_loss == pytest.approx(3.0)

    def test_past_expiration_not_rejected(self, scenario_quotes, make_future, config):
        """Past expirations are penalized, not excluded."""
        from datetime import date

        candidates = discover_strategies_for_expiration(
            EXP, scenario_quotes, make_future(EXP, 20.0), config, date(2025, 9, 19)
        )
        assert candidates
        assert all(c.days_to_expiration == -10 for c in candidates)
        assert all(c.metrics.optimal_timing_bonus == 0.01 for c in candidates)

    def test_malformed_expiration(self, scenario_quotes, make_future, config, as_of):
        with pytest.raises(InvalidExpirationError):
            discover_strategies_for_expiration(
                "2025-09", scenario_quotes, make_future("2025-09", 20.0), config, as_of
            )

    def test_empty_quotes(self, make_future, config, as_of):
        assert discover_strategies_for_expiration(EXP, [], make_future(EXP, 20.0), config, as_of) == []
