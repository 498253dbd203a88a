"""Data loading, cleaning and indicator encoding.

The two populations (labelled primary, unlabelled holdout) are cleaned
independently by :func:`clean_customer_table`; the training encoding learned
by :func:`encode_training` is then replayed on the holdout by
:func:`encode_holdout`, which zero-fills training-only indicator columns.
"""

from __future__ import annotations

from .errors import (
    DateParseError,
    EmptyColumnError,
    MissingColumnsError,
    MissingInputError,
    ResponseCodingError,
    ResponseDataError,
    SchemaMismatchError,
)
from .features import EncodingSchema, align_to_schema, encode_holdout, encode_training
from .load import load_datasets, load_table, require_columns
from .preprocess import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_REFERENCE_DATE,
    NEGATIVE_LABEL,
    POSITIVE_LABEL,
    TENURE_COLUMN,
    CleaningResult,
    clean_customer_table,
    coerce_categoricals,
    coerce_response,
    drop_duplicate_rows,
    filter_iqr_outliers,
    impute_numeric_means,
    iqr_bounds,
    parse_enrollment_dates,
    split_train_test,
)

__all__ = [
    # errors
    "ResponseDataError",
    "MissingColumnsError",
    "MissingInputError",
    "EmptyColumnError",
    "DateParseError",
    "SchemaMismatchError",
    "ResponseCodingError",
    # loading
    "load_table",
    "load_datasets",
    "require_columns",
    # cleaning
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_REFERENCE_DATE",
    "POSITIVE_LABEL",
    "NEGATIVE_LABEL",
    "TENURE_COLUMN",
    "CleaningResult",
    "clean_customer_table",
    "coerce_categoricals",
    "coerce_response",
    "drop_duplicate_rows",
    "parse_enrollment_dates",
    "impute_numeric_means",
    "iqr_bounds",
    "filter_iqr_outliers",
    "split_train_test",
    # encoding
    "EncodingSchema",
    "encode_training",
    "encode_holdout",
    "align_to_schema",
]
