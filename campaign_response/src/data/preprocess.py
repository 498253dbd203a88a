"""Cleaning, imputation, outlier filtering and splitting.

The cleaning steps run in a fixed order for each population (primary and
holdout) independently:

1) coerce designated columns to categorical and relabel the 0/1 response;
2) drop exact duplicate rows;
3) parse the enrolment date (month/day/year) and derive ``Customer_Days``;
4) mean-impute numeric columns with missing entries;
5) keep only rows whose income lies within the 1.5*IQR fences.

Step 5 changes row counts, so it must run before anything that joins or
indexes the two populations against each other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from .errors import DateParseError, EmptyColumnError, ResponseCodingError

logger = logging.getLogger(__name__)


DEFAULT_DATE_FORMAT = "%m/%d/%Y"

# Fixed reference point for tenure so train and holdout share the same origin.
DEFAULT_REFERENCE_DATE = pd.Timestamp("2014-06-29")

RESPONSE_LABELS = {0: "No", 1: "Yes"}
POSITIVE_LABEL = "Yes"
NEGATIVE_LABEL = "No"

TENURE_COLUMN = "Customer_Days"


# -----------------------------------------------------------------------------
# Type coercion
# -----------------------------------------------------------------------------


def coerce_categoricals(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Cast ``columns`` to the pandas ``category`` dtype (missing columns are skipped)."""
    out = df.copy()
    for col in columns:
        if col in out.columns:
            out[col] = out[col].astype("category")
    return out


def coerce_response(
    df: pd.DataFrame,
    response_col: str,
    positive_label: str = POSITIVE_LABEL,
) -> pd.DataFrame:
    """Relabel a 0/1 response to ``No``/``Yes`` with the positive class first.

    The positive label is placed first in the category order (the reference
    level), which is what downstream probability extraction keys on.
    Already-relabelled columns are accepted as-is.
    """
    out = df.copy()
    raw = out[response_col]

    if raw.isna().any():
        raise ResponseCodingError(
            f"Response column '{response_col}' has {int(raw.isna().sum())} missing values."
        )

    labels = set(RESPONSE_LABELS.values())
    if set(raw.astype(str).unique()) <= labels:
        relabelled = raw.astype(str)
    else:
        numeric = pd.to_numeric(raw, errors="coerce")
        bad = raw[numeric.isna() | ~numeric.isin(list(RESPONSE_LABELS))]
        if len(bad) > 0:
            raise ResponseCodingError(
                f"Response column '{response_col}' must be coded 0/1; "
                f"found {sorted(bad.astype(str).unique().tolist())[:5]}"
            )
        relabelled = numeric.astype(int).map(RESPONSE_LABELS)

    others = [lab for lab in RESPONSE_LABELS.values() if lab != positive_label]
    out[response_col] = pd.Categorical(relabelled, categories=[positive_label] + others)
    return out


# -----------------------------------------------------------------------------
# Row-level cleaning
# -----------------------------------------------------------------------------


def drop_duplicate_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Remove exact duplicate rows and reset the index."""
    out = df.drop_duplicates().reset_index(drop=True)
    n_dropped = len(df) - len(out)
    if n_dropped:
        logger.info("Dropped %d duplicate rows (%d remain)", n_dropped, len(out))
    return out


def parse_enrollment_dates(
    df: pd.DataFrame,
    column: str,
    date_format: str = DEFAULT_DATE_FORMAT,
    strict: bool = True,
) -> pd.DataFrame:
    """Parse ``column`` with a fixed format.

    With ``strict=True`` any non-empty value that does not match
    ``date_format`` raises :class:`DateParseError`. Otherwise such values become
    ``NaT`` and a warning with the count is logged.
    """
    out = df.copy()
    s = out[column]
    if pd.api.types.is_datetime64_any_dtype(s):
        return out

    parsed = pd.to_datetime(s, format=date_format, errors="coerce")
    bad = s.notna() & parsed.isna()
    if bad.any():
        if strict:
            raise DateParseError(column, date_format, s[bad].astype(str).head(3))
        logger.warning(
            "%d values in '%s' do not match %s and were set to missing",
            int(bad.sum()),
            column,
            date_format,
        )

    out[column] = parsed
    return out


def add_customer_days(
    df: pd.DataFrame,
    date_col: str,
    reference_date: pd.Timestamp | str = DEFAULT_REFERENCE_DATE,
    out_col: str = TENURE_COLUMN,
) -> pd.DataFrame:
    """Days from enrolment to ``reference_date`` (NaN where the date is missing)."""
    out = df.copy()
    ref = pd.Timestamp(reference_date)
    out[out_col] = (ref - out[date_col]).dt.days.clip(lower=0).astype(float)
    return out


# -----------------------------------------------------------------------------
# Imputation & outliers
# -----------------------------------------------------------------------------


def numeric_columns(df: pd.DataFrame, exclude: Iterable[str] = ()) -> list[str]:
    excluded = set(exclude)
    return [
        c
        for c in df.columns
        if c not in excluded and pd.api.types.is_numeric_dtype(df[c]) and not pd.api.types.is_bool_dtype(df[c])
    ]


def impute_numeric_means(
    df: pd.DataFrame,
    exclude: Iterable[str] = (),
    means: Optional[Mapping[str, float]] = None,
) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """Replace missing numeric values with a column mean.

    Parameters
    ----------
    exclude:
        Columns never imputed (e.g. identifiers).
    means:
        Precomputed means (typically from the training population). Columns
        not covered fall back to this frame's own mean.

    Returns
    -------
    imputed:
        Copy of ``df`` without missing numeric values.
    means:
        Mean used (or available) for every numeric column, computed before any
        filling.
    """
    out = df.copy()
    cols = numeric_columns(out, exclude=exclude)

    own_means = {c: float(out[c].mean()) for c in cols if out[c].notna().any()}
    used: Dict[str, float] = dict(own_means)
    if means is not None:
        used.update({c: float(v) for c, v in means.items() if c in cols})

    for col in cols:
        n_missing = int(out[col].isna().sum())
        if n_missing == 0:
            continue
        if col not in used:
            raise EmptyColumnError(col)
        out[col] = out[col].fillna(used[col])
        logger.info("Imputed %d missing values in '%s' with mean %.4f", n_missing, col, used[col])

    return out, used


def iqr_bounds(values: pd.Series, k: float = 1.5) -> Tuple[float, float]:
    """Return ``(Q1 - k*IQR, Q3 + k*IQR)``."""
    q1 = float(values.quantile(0.25))
    q3 = float(values.quantile(0.75))
    iqr = q3 - q1
    return q1 - k * iqr, q3 + k * iqr


def filter_iqr_outliers(
    df: pd.DataFrame,
    column: str,
    k: float = 1.5,
) -> Tuple[pd.DataFrame, Tuple[float, float]]:
    """Keep rows whose ``column`` lies within the IQR fences (inclusive)."""
    lo, hi = iqr_bounds(df[column], k=k)
    keep = df[column].between(lo, hi)
    out = df.loc[keep].reset_index(drop=True)
    logger.info(
        "Income fences for '%s': [%.2f, %.2f]; removed %d rows (%d remain)",
        column,
        lo,
        hi,
        int((~keep).sum()),
        len(out),
    )
    return out, (lo, hi)


# -----------------------------------------------------------------------------
# Full cleaning pass
# -----------------------------------------------------------------------------


@dataclass
class CleaningResult:
    """Output of :func:`clean_customer_table`."""

    frame: pd.DataFrame
    means: Dict[str, float] = field(default_factory=dict)
    income_bounds: Tuple[float, float] = (np.nan, np.nan)


def clean_customer_table(
    df: pd.DataFrame,
    *,
    categorical_cols: Sequence[str],
    income_col: str,
    date_col: str,
    response_col: Optional[str] = None,
    id_col: Optional[str] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    strict_dates: bool = True,
    reference_date: pd.Timestamp | str = DEFAULT_REFERENCE_DATE,
    iqr_k: float = 1.5,
    impute_means: Optional[Mapping[str, float]] = None,
) -> CleaningResult:
    """Run every cleaning step on one population.

    The identifier and raw date columns are dropped before deduplication, so
    customers that differ only by ``id_col`` collapse to one row and the
    returned frame holds only modelling columns (plus the response when
    ``response_col`` is given).
    """
    out = coerce_categoricals(df, categorical_cols)
    if response_col is not None:
        out = coerce_response(out, response_col)

    out = parse_enrollment_dates(out, date_col, date_format=date_format, strict=strict_dates)
    out = add_customer_days(out, date_col, reference_date=reference_date)

    drop = [c for c in (id_col, date_col) if c is not None and c in out.columns]
    out = out.drop(columns=drop)
    out = drop_duplicate_rows(out)

    out, means = impute_numeric_means(out, means=impute_means)
    out, bounds = filter_iqr_outliers(out, income_col, k=iqr_k)

    return CleaningResult(frame=out, means=means, income_bounds=bounds)


# -----------------------------------------------------------------------------
# Splitting
# -----------------------------------------------------------------------------


def split_train_test(
    features: pd.DataFrame,
    labels: pd.Series,
    test_size: float = 0.2,
    random_state: int = 42,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.Series, pd.Series]:
    """Stratified train/test split preserving class proportions."""
    if not (0.0 < test_size < 1.0):
        raise ValueError("test_size must be in (0, 1).")

    x_train, x_test, y_train, y_test = train_test_split(
        features,
        labels,
        test_size=test_size,
        random_state=random_state,
        stratify=labels,
    )
    return x_train, x_test, y_train, y_test


__all__ = [
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_REFERENCE_DATE",
    "POSITIVE_LABEL",
    "NEGATIVE_LABEL",
    "RESPONSE_LABELS",
    "TENURE_COLUMN",
    "CleaningResult",
    "coerce_categoricals",
    "coerce_response",
    "drop_duplicate_rows",
    "parse_enrollment_dates",
    "add_customer_days",
    "numeric_columns",
    "impute_numeric_means",
    "iqr_bounds",
    "filter_iqr_outliers",
    "clean_customer_table",
    "split_train_test",
]
