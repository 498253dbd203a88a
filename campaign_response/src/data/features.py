"""Indicator encoding shared by the training and holdout populations.

Categorical columns are expanded into one 0/1 column per level, minus a
dropped baseline level per column (the first level in sorted order, as a
model formula would pick it). The baseline and the full column list are
learned on the training population and stored in an :class:`EncodingSchema`,
which is then applied to the holdout:

* holdout indicator columns must be a subset of the training columns;
* training columns absent from the holdout (e.g. a rare level never seen in
  the holdout) are added back as explicit zero columns;
* a holdout level unknown to training raises :class:`SchemaMismatchError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import MissingColumnsError, SchemaMismatchError
from .preprocess import POSITIVE_LABEL

logger = logging.getLogger(__name__)


@dataclass
class EncodingSchema:
    """Column layout learned on the training population."""

    categorical: List[str]
    baselines: Dict[str, str]
    feature_columns: List[str]
    response_col: Optional[str] = None
    positive_label: str = POSITIVE_LABEL

    @property
    def indicator_columns(self) -> List[str]:
        prefixes = tuple(f"{c}_" for c in self.categorical)
        return [c for c in self.feature_columns if c.startswith(prefixes)]


def _level_labels(col: pd.Series) -> pd.Series:
    """Text labels for the levels of ``col``; missing entries stay missing.

    Numeric levels are written the same way in every population: a column of
    whole numbers reads ``"1"`` whether or not a NaN upcast it to float.
    """
    values = col.astype(object)
    observed = values.dropna()
    if pd.api.types.infer_dtype(observed, skipna=True) in ("integer", "floating", "mixed-integer-float"):
        numbers = observed.astype(float)
        observed = numbers.astype("int64") if (numbers % 1 == 0).all() else numbers

    labels = pd.Series(np.nan, index=col.index, dtype=object)
    labels.loc[values.notna().to_numpy()] = observed.astype(str).to_numpy()
    return labels


def _expand(df: pd.DataFrame, categorical: Sequence[str]) -> pd.DataFrame:
    """Full 0/1 expansion (no level dropped yet)."""
    present = [c for c in categorical if c in df.columns]
    if not present:
        return df.copy()
    return pd.get_dummies(df, columns=present, prefix_sep="_", dtype=int)


def _check_numeric(features: pd.DataFrame) -> None:
    non_numeric = [c for c in features.columns if not pd.api.types.is_numeric_dtype(features[c])]
    if non_numeric:
        raise SchemaMismatchError(
            f"Non-numeric columns remain after encoding: {non_numeric}. "
            "Declare them as categorical or drop them before encoding."
        )


def encode_training(
    df: pd.DataFrame,
    categorical: Sequence[str],
    response_col: str,
    positive_label: str = POSITIVE_LABEL,
) -> Tuple[pd.DataFrame, pd.Series, EncodingSchema]:
    """Encode the labelled population and learn the schema.

    Returns
    -------
    features:
        Numeric feature matrix with one indicator column per non-baseline level.
    labels:
        The response column (categorical, positive label first).
    schema:
        Learned :class:`EncodingSchema`.
    """
    missing = [c for c in list(categorical) + [response_col] if c not in df.columns]
    if missing:
        raise MissingColumnsError(missing, table="training")

    labels = df[response_col]
    work = df.drop(columns=[response_col])

    baselines: Dict[str, str] = {}
    for col in categorical:
        work[col] = _level_labels(work[col])
        levels = sorted(work[col].dropna().unique())
        if not levels:
            raise SchemaMismatchError(f"Categorical column '{col}' has no observed levels.")
        baselines[col] = levels[0]

    expanded = _expand(work, categorical)
    baseline_cols = [f"{col}_{lvl}" for col, lvl in baselines.items()]
    features = expanded.drop(columns=[c for c in baseline_cols if c in expanded.columns])
    _check_numeric(features)

    schema = EncodingSchema(
        categorical=list(categorical),
        baselines=baselines,
        feature_columns=list(features.columns),
        response_col=response_col,
        positive_label=positive_label,
    )
    logger.info(
        "Encoded training features: %d columns (%d indicators, baselines=%s)",
        len(schema.feature_columns),
        len(schema.indicator_columns),
        baselines,
    )
    return features, labels, schema


def align_to_schema(features: pd.DataFrame, schema: EncodingSchema) -> Tuple[pd.DataFrame, List[str]]:
    """Reorder ``features`` to the training layout, zero-filling absent columns.

    Raises :class:`SchemaMismatchError` when ``features`` carries columns the
    training schema does not know.
    """
    extra = [c for c in features.columns if c not in schema.feature_columns]
    if extra:
        raise SchemaMismatchError(f"Holdout has columns unknown to the training schema: {extra}")

    filled = [c for c in schema.feature_columns if c not in features.columns]
    non_indicator = [c for c in filled if c not in schema.indicator_columns]
    if non_indicator:
        raise SchemaMismatchError(f"Holdout is missing non-indicator feature columns: {non_indicator}")

    aligned = features.reindex(columns=schema.feature_columns, fill_value=0)
    return aligned, filled


def encode_holdout(df: pd.DataFrame, schema: EncodingSchema) -> Tuple[pd.DataFrame, List[str]]:
    """Encode an unlabelled population with a training :class:`EncodingSchema`.

    Returns the aligned feature matrix and the names of the training
    indicator columns that were zero-filled.
    """
    missing = [c for c in schema.categorical if c not in df.columns]
    if missing:
        raise MissingColumnsError(missing, table="holdout")

    work = df.copy()
    if schema.response_col is not None and schema.response_col in work.columns:
        logger.info("Dropping response column '%s' from holdout before encoding", schema.response_col)
        work = work.drop(columns=[schema.response_col])

    for col in schema.categorical:
        work[col] = _level_labels(work[col])

    expanded = _expand(work, schema.categorical)
    baseline_cols = [f"{col}_{lvl}" for col, lvl in schema.baselines.items()]
    features = expanded.drop(columns=[c for c in baseline_cols if c in expanded.columns])
    _check_numeric(features)

    aligned, filled = align_to_schema(features, schema)
    if filled:
        logger.info("Holdout lacks %d training indicator(s); filled with 0: %s", len(filled), filled)
    return aligned, filled


__all__ = [
    "EncodingSchema",
    "encode_training",
    "encode_holdout",
    "align_to_schema",
]
