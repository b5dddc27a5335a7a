"""
Ranking system for debit-spread candidates.

Sorts candidates pooled across expirations and formats the ranked list.
"""

import logging
from typing import Optional, Sequence

from spread_recommender.config import TOP_N
from spread_recommender.expirations import format_expiration
from spread_recommender.models import StrategyCandidate, format_strike

logger = logging.getLogger(__name__)


def rank_strategies(
    candidates: Sequence[StrategyCandidate],
    top_n: int = TOP_N,
    min_score: Optional[float] = None,
) -> list[StrategyCandidate]:
    """
    Rank candidates by time-adjusted score.

    The sort is stable: equal scores keep their generation order.

    Args:
        candidates: Candidates from all expirations
        top_n: Number of top candidates to return
        min_score: Optional minimum score threshold

    Returns:
        Candidates sorted by score descending, at most top_n long
    """
    # Filter by minimum score
    if min_score is not None:
        candidates = [c for c in candidates if c.time_adjusted_score >= min_score]

    # Sort by score descending
    ranked = sorted(
        candidates,
        key=lambda c: c.metrics.time_adjusted_score,
        reverse=True,
    )

    # Take top N
    ranked = ranked[:top_n]

    logger.info(f"Ranked {len(ranked)} strategies from {len(candidates)} candidates")

    return ranked


def group_by_expiration(
    candidates: Sequence[StrategyCandidate],
) -> dict[str, list[StrategyCandidate]]:
    """
    Group candidates by expiration code, preserving order within each group.
    """
    groups: dict[str, list[StrategyCandidate]] = {}

    for candidate in candidates:
        groups.setdefault(candidate.expiration, []).append(candidate)

    return groups


def get_best_per_expiration(
    ranked: Sequence[StrategyCandidate],
    top_per_exp: int = 3,
) -> list[StrategyCandidate]:
    """
    Get the top N ranked candidates for each expiration, earliest first.
    """
    groups = group_by_expiration(ranked)

    result = []
    for expiration in sorted(groups.keys()):
        result.extend(groups[expiration][:top_per_exp])

    return result


def format_ranking_report(ranked: Sequence[StrategyCandidate]) -> str:
    """
    Format a human-readable ranking report.

    Args:
        ranked: Ranked candidates

    Returns:
        Formatted report string
    """
    if not ranked:
        return "No viable debit spread strategies under current market conditions"

    lines = [
        "=" * 70,
        "DEBIT SPREAD STRATEGY RECOMMENDATIONS",
        "=" * 70,
        "",
    ]

    for rank, c in enumerate(ranked, start=1):
        m = c.metrics
        lines.append("-" * 70)
        lines.append(
            f"Rank #{rank} | Score: {m.time_adjusted_score:.3f} | "
            f"Timing bonus: {m.optimal_timing_bonus:.2f}"
        )
        lines.append(
            f"Expiration: {format_expiration(c.expiration)} "
            f"({c.days_to_expiration} DTE) | Future: {c.future_price:.2f}"
        )
        lines.append(c.summary())
        lines.append(
            f"Max Profit: ${m.max_profit:.0f} | Max Loss: ${m.max_loss:.0f} | "
            f"Break-even: {m.break_even_point:.2f}"
        )
        lines.append(
            f"Win rate: {m.win_rate:.0%} | Efficiency: {m.capital_efficiency:.2f} | "
            f"Quarterly: {m.quarterly_return:.0%} | Annualized: {m.annualized_return:.0%}"
        )
        lines.append("")

    lines.append("=" * 70)
    lines.append(f"Total strategies: {len(ranked)}")
    lines.append("=" * 70)

    return "\n".join(lines)


def format_csv_output(ranked: Sequence[StrategyCandidate]) -> str:
    """
    Format ranked candidates as CSV.
    """
    headers = [
        "rank", "id", "expiration", "dte", "future_price",
        "sell_strike", "buy_strike", "sell_price", "buy_price", "net_debit",
        "max_profit", "max_loss", "break_even", "win_rate",
        "capital_efficiency", "quarterly_return", "annualized_return",
        "timing_bonus", "score",
    ]

    lines = [",".join(headers)]

    for rank, c in enumerate(ranked, start=1):
        m = c.metrics
        row = [
            str(rank),
            c.id,
            c.expiration,
            str(c.days_to_expiration),
            f"{c.future_price:.2f}",
            format_strike(c.sell_strike),
            format_strike(c.buy_strike),
            f"{c.sell_price:.2f}",
            f"{c.buy_price:.2f}",
            f"{c.net_debit:.2f}",
            f"{m.max_profit:.0f}",
            f"{m.max_loss:.0f}",
            f"{m.break_even_point:.2f}",
            f"{m.win_rate:.3f}",
            f"{m.capital_efficiency:.3f}",
            f"{m.quarterly_return:.3f}",
            f"{m.annualized_return:.3f}",
            f"{m.optimal_timing_bonus:.3f}",
            f"{m.time_adjusted_score:.3f}",
        ]
        lines.append(",".join(row))

    return "\n".join(lines)
