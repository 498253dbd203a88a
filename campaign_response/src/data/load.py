"""Data loading helpers for the customer response tables.

Customer exports are not always comma-separated (tab and semicolon variants are
common). This module provides a small, robust loader that:

1) tries standard :func:`pandas.read_csv` parsing;
2) falls back to delimiter auto-detection if parsing looks suspicious.

Important
---------
The enrolment date column holds month/day/year strings. It is read as plain
text here and parsed explicitly in
``campaign_response.src.data.preprocess.parse_enrollment_dates`` so a malformed
value is reported instead of being guessed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Tuple, Union

import pandas as pd
from pandas.errors import ParserError

from .errors import MissingColumnsError

logger = logging.getLogger(__name__)


def load_table(
    path: Union[str, Path],
    min_expected_columns: int = 5,
) -> pd.DataFrame:
    """Load one delimited table with a header row.

    Parameters
    ----------
    path:
        Location of the delimited file.
    min_expected_columns:
        Sanity threshold: if fewer columns are parsed, we assume delimiter
        parsing failed and fall back to auto-detection.
    """
    csv_path = Path(path)
    if not csv_path.is_file():
        raise FileNotFoundError(f"Expected a data file at {csv_path}.")

    # First attempt: default pandas CSV parsing.
    try:
        df = pd.read_csv(csv_path)
    except ParserError:
        df = None

    if df is None or df.shape[1] < min_expected_columns:
        try:
            df = pd.read_csv(
                csv_path,
                sep=None,  # infer '\t', ';', ...
                engine="python",
            )
        except ParserError as exc:
            raise ValueError(
                f"Failed to parse {csv_path} with automatic delimiter detection."
            ) from exc

    if df.shape[1] < min_expected_columns:
        raise ValueError(
            f"Parsed {csv_path} has only {df.shape[1]} columns; "
            "please verify the delimiter and header row."
        )

    logger.info("Loaded %s: %d rows x %d columns", csv_path, df.shape[0], df.shape[1])
    return df


def require_columns(df: pd.DataFrame, columns: Iterable[str], table: str = "input") -> None:
    """Raise :class:`MissingColumnsError` if any of ``columns`` is absent."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise MissingColumnsError(missing, table=table)


def load_datasets(
    primary_path: Union[str, Path],
    holdout_path: Union[str, Path],
    primary_required: Iterable[str] = (),
    holdout_required: Iterable[str] = (),
    min_expected_columns: int = 5,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Load the labelled primary table and the unlabelled holdout table."""
    primary = load_table(primary_path, min_expected_columns=min_expected_columns)
    require_columns(primary, primary_required, table="primary")

    holdout = load_table(holdout_path, min_expected_columns=min_expected_columns)
    require_columns(holdout, holdout_required, table="holdout")

    return primary, holdout


__all__ = ["load_table", "load_datasets", "require_columns"]
