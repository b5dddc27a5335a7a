"""
Exceptions for the spread recommender package.
"""

from typing import List


class SpreadRecommenderError(Exception):
    """Base exception for spread recommender errors."""

    pass


class InvalidExpirationError(SpreadRecommenderError, ValueError):
    """Expiration code is not a valid YYYYMMDD calendar date."""

    def __init__(self, code: object, details: str = "") -> None:
        self.code = code
        message = f"Invalid expiration code: {code!r}"
        if details:
            message += f": {details}"
        super().__init__(message)


class ConfigurationError(SpreadRecommenderError):
    """Invalid configuration."""

    pass


class LoaderError(SpreadRecommenderError):
    """Error loading a price grid or future prices."""

    pass


class EmptyFileError(LoaderError):
    """Input file is empty."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(f"File is empty: {file_path}")


class MissingColumnError(LoaderError):
    """Required columns are missing from tabular input."""

    def __init__(self, missing_columns: List[str]) -> None:
        self.missing_columns = missing_columns
        message = f"Missing required columns: {', '.join(missing_columns)}"
        super().__init__(message)


class InvalidDataError(LoaderError):
    """Input values cannot be converted to the expected types."""

    def __init__(self, column: str, details: str = "") -> None:
        self.column = column
        message = f"Invalid data in '{column}'"
        if details:
            message += f": {details}"
        super().__init__(message)
