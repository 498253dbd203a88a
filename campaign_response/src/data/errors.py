"""Typed failures raised by the data layer.

All exceptions derive from :class:`ResponseDataError` (a ``ValueError``) so a
runner can catch every data problem with a single ``except`` clause and still
let genuine programming errors propagate.
"""

from __future__ import annotations

from typing import Iterable, List


class ResponseDataError(ValueError):
    """Base class for input data problems."""


class MissingInputError(ResponseDataError):
    """An input table path was not configured."""


class MissingColumnsError(ResponseDataError, KeyError):
    """A table lacks one or more required columns."""

    def __init__(self, missing: Iterable[str], table: str = "input"):
        self.missing: List[str] = list(missing)
        self.table = table
        super().__init__(f"Missing required columns in {table} table: {self.missing}")

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable in logs.
        return str(self.args[0])


class EmptyColumnError(ResponseDataError):
    """A numeric column has no observed values to impute from."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column '{column}' is entirely missing; cannot compute an imputation mean.")


class DateParseError(ResponseDataError):
    """Date strings could not be parsed with the expected format."""

    def __init__(self, column: str, date_format: str, examples: Iterable[str]):
        self.column = column
        self.date_format = date_format
        self.examples = list(examples)
        super().__init__(
            f"Column '{column}' has values not matching format {date_format!r}, "
            f"e.g. {self.examples}"
        )


class SchemaMismatchError(ResponseDataError):
    """Encoded feature columns are incompatible with the training schema."""


class ResponseCodingError(ResponseDataError):
    """The response column holds values outside the expected binary coding."""


__all__ = [
    "ResponseDataError",
    "MissingInputError",
    "MissingColumnsError",
    "EmptyColumnError",
    "DateParseError",
    "SchemaMismatchError",
    "ResponseCodingError",
]
