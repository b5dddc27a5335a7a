"""
CLI interface for the debit-spread strategy recommender.

Usage:
    python -m spread_recommender options.csv futures.csv
    python -m spread_recommender options.json futures.json --as-of 2025-06-02 --top 10
    python -m spread_recommender options.csv futures.csv --csv ranked.csv
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

from spread_recommender.config import load_config
from spread_recommender.engine import StrategyEngine
from spread_recommender.loader import load_future_prices, load_price_grid


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="spread_recommender",
        description="Recommend put debit spreads for a 90-120 day holding window.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m spread_recommender options.csv futures.csv
  python -m spread_recommender options.json futures.json --top 10
  python -m spread_recommender options.csv futures.csv --as-of 2025-06-02
  python -m spread_recommender options.csv futures.csv --config engine.yaml --json

Strategy Overview:
  Sell a put near the current future price (hedge) and buy a higher-strike
  put (main leg) for a net debit. The spread profits when the underlying
  declines; the loss is capped at the debit paid.
        """,
    )

    parser.add_argument(
        "options",
        type=str,
        help="Option price grid (.csv or .json)",
    )
    parser.add_argument(
        "futures",
        type=str,
        help="Future prices per expiration (.csv or .json)",
    )

    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Date to count days to expiration from, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--config",
        type=str,
        metavar="FILE",
        help="YAML file overriding engine thresholds and weights",
    )
    parser.add_argument(
        "--top", "-n",
        type=int,
        default=None,
        help="Number of top results to show (default: 50)",
    )

    # Output format
    parser.add_argument(
        "--csv",
        type=str,
        metavar="FILE",
        help="Output results to CSV file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON to stdout",
    )

    # Verbosity
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)

    setup_logging(args.verbose, args.debug)

    try:
        config = load_config(args.config)
        if args.top is not None:
            config = replace(config, top_n=args.top)

        price_grid = load_price_grid(args.options)
        future_prices = load_future_prices(args.futures)

        result = StrategyEngine(config=config).run(price_grid, future_prices, args.as_of)

        if args.json:
            print(json.dumps(result.to_dict(), indent=2))

        elif args.csv:
            Path(args.csv).write_text(result.to_csv())
            print(f"Results saved to {args.csv}")
            print()
            print(result.to_report())

        else:
            print(result.to_report())

        return 0

    except Exception as e:
        logging.exception("Error during strategy generation")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
