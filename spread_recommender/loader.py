"""
Input Loader Module.

Loads a price grid and future prices from CSV (pandas) or JSON files and
converts them to the engine's input mappings.
"""

import json
import logging
from pathlib import Path
from typing import Union

import pandas as pd
from pydantic import ValidationError

from spread_recommender.exceptions import (
    EmptyFileError,
    InvalidDataError,
    LoaderError,
    MissingColumnError,
)
from spread_recommender.models import FutureQuote, OptionQuote
from spread_recommender.schemas import FuturePricesAdapter, PriceGridPayload

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

OPTION_COLUMNS = ["expiration", "strike", "bid", "ask", "mid_price", "last_price"]
OPTION_NUMERIC_COLUMNS = ["strike", "bid", "ask", "mid_price", "last_price"]
OPTION_OPTIONAL_COLUMNS = ["volume", "implied_volatility", "delta", "gamma", "theta", "vega"]

FUTURE_COLUMNS = ["expiration", "symbol", "bid", "ask", "mid_price", "last_price"]
FUTURE_NUMERIC_COLUMNS = ["bid", "ask", "mid_price", "last_price"]

# Dashboard (camelCase) column names
COLUMN_ALIASES = {
    "midPrice": "mid_price",
    "lastPrice": "last_price",
    "impliedVolatility": "implied_volatility",
}


def load_csv(file_path: PathLike) -> pd.DataFrame:
    """
    Load a CSV file with the expiration column kept as text.

    Raises:
        FileNotFoundError: If the file does not exist.
        EmptyFileError: If the file has no data rows.
        LoaderError: If the file cannot be parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if path.stat().st_size == 0:
        raise EmptyFileError(str(path))

    try:
        df = pd.read_csv(path, dtype={"expiration": str})
    except pd.errors.EmptyDataError:
        raise EmptyFileError(str(path))
    except Exception as e:
        raise LoaderError(f"Failed to parse CSV: {e}")

    if df.empty:
        raise EmptyFileError(str(path))

    df.columns = df.columns.str.strip()
    return df.rename(columns=COLUMN_ALIASES)


def validate_columns(df: pd.DataFrame, required: list[str]) -> None:
    """
    Raises:
        MissingColumnError: If any required columns are missing.
    """
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise MissingColumnError(missing)


def coerce_numeric(df: pd.DataFrame, columns: list[str], required: bool = True) -> pd.DataFrame:
    """
    Convert columns to numeric types.

    Args:
        df: Input DataFrame.
        columns: Columns to convert; absent columns are ignored.
        required: Whether missing values are an error.

    Raises:
        InvalidDataError: If a value cannot be converted, or a required
            column has missing values.
    """
    df = df.copy()

    for col in columns:
        if col not in df.columns:
            continue

        original = df[col]
        df[col] = pd.to_numeric(original, errors="coerce")

        failures = df[col].isna() & ~original.isna()
        if failures.any():
            bad_value = original[failures].iloc[0]
            raise InvalidDataError(col, f"Cannot convert '{bad_value}' to numeric")

        if required and df[col].isna().any():
            raise InvalidDataError(col, f"Contains {df[col].isna().sum()} missing value(s)")

    return df


def _optional(value, cast):
    if value is None or pd.isna(value):
        return None
    return cast(value)


def price_grid_from_frame(df: pd.DataFrame) -> dict[str, list[OptionQuote]]:
    """
    Build a price grid from a quote table, one row per (expiration, strike).

    Expirations keep their first-seen order.
    """
    validate_columns(df, OPTION_COLUMNS)
    df = coerce_numeric(df, OPTION_NUMERIC_COLUMNS)
    df = coerce_numeric(df, OPTION_OPTIONAL_COLUMNS, required=False)

    grid: dict[str, list[OptionQuote]] = {}
    for row in df.to_dict(orient="records"):
        expiration = str(row["expiration"]).strip()
        grid.setdefault(expiration, []).append(OptionQuote(
            expiration=expiration,
            strike=float(row["strike"]),
            bid=float(row["bid"]),
            ask=float(row["ask"]),
            mid_price=float(row["mid_price"]),
            last_price=float(row["last_price"]),
            volume=_optional(row.get("volume"), int),
            implied_volatility=_optional(row.get("implied_volatility"), float),
            delta=_optional(row.get("delta"), float),
            gamma=_optional(row.get("gamma"), float),
            theta=_optional(row.get("theta"), float),
            vega=_optional(row.get("vega"), float),
        ))

    return grid


def future_prices_from_frame(df: pd.DataFrame) -> dict[str, FutureQuote]:
    """
    Build the future price map from a table, one row per expiration.

    A repeated expiration keeps its last row.
    """
    validate_columns(df, FUTURE_COLUMNS)
    df = coerce_numeric(df, FUTURE_NUMERIC_COLUMNS)
    df = coerce_numeric(df, ["volume"], required=False)

    futures: dict[str, FutureQuote] = {}
    for row in df.to_dict(orient="records"):
        expiration = str(row["expiration"]).strip()
        if expiration in futures:
            logger.warning(f"Duplicate future quote for {expiration}, keeping the last one")
        futures[expiration] = FutureQuote(
            expiration=expiration,
            symbol=str(row["symbol"]),
            bid=float(row["bid"]),
            ask=float(row["ask"]),
            mid_price=float(row["mid_price"]),
            last_price=float(row["last_price"]),
            volume=_optional(row.get("volume"), int),
        )

    return futures


def _load_json(file_path: PathLike):
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        with open(path, "r") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise LoaderError(f"Failed to parse JSON: {e}")


def load_price_grid(file_path: PathLike) -> dict[str, list[OptionQuote]]:
    """
    Load a price grid from a ``.csv`` or ``.json`` file.

    JSON may be ``{"expirations": [...], "results": {exp: [quote, ...]}}``
    or a bare ``{exp: [quote, ...]}`` mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        LoaderError: If the file is malformed.
    """
    if Path(file_path).suffix.lower() == ".json":
        data = _load_json(file_path)
        if isinstance(data, dict) and "results" not in data:
            data = {"results": data}
        try:
            grid = PriceGridPayload.model_validate(data).to_price_grid()
        except ValidationError as e:
            raise LoaderError(f"Invalid price grid: {e}")
    else:
        grid = price_grid_from_frame(load_csv(file_path))

    logger.info(
        f"Loaded {sum(len(q) for q in grid.values())} option quotes "
        f"across {len(grid)} expirations"
    )
    return grid


def load_future_prices(file_path: PathLike) -> dict[str, FutureQuote]:
    """
    Load future prices from a ``.csv`` or ``.json`` file.

    JSON is a ``{exp: quote}`` mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        LoaderError: If the file is malformed.
    """
    if Path(file_path).suffix.lower() == ".json":
        data = _load_json(file_path)
        try:
            parsed = FuturePricesAdapter.validate_python(data)
        except ValidationError as e:
            raise LoaderError(f"Invalid future prices: {e}")
        futures = {exp: q.to_quote(exp) for exp, q in parsed.items()}
    else:
        futures = future_prices_from_frame(load_csv(file_path))

    logger.info(f"Loaded {len(futures)} future prices")
    return futures
