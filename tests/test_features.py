from __future__ import annotations

import pandas as pd
import pytest

from campaign_response.src.data.errors import MissingColumnsError, SchemaMismatchError
from campaign_response.src.data.features import align_to_schema, encode_holdout, encode_training
from campaign_response.src.data.preprocess import clean_customer_table

CATS = ["Education", "Marital_Status"]
CLEAN_KW = dict(categorical_cols=CATS, income_col="Income", date_col="Dt_Customer", id_col="ID")


@pytest.fixture
def cleaned(primary_df, holdout_df):
    train = clean_customer_table(primary_df, response_col="Response", **CLEAN_KW)
    hold = clean_customer_table(holdout_df, impute_means=train.means, **CLEAN_KW)
    return train.frame, hold.frame


def test_encode_training_drops_one_baseline_per_column(cleaned):
    train, _ = cleaned
    features, labels, schema = encode_training(train, CATS, "Response")

    assert schema.baselines == {"Education": "2n Cycle", "Marital_Status": "Divorced"}
    assert "Education_2n Cycle" not in features.columns
    assert "Marital_Status_Divorced" not in features.columns
    assert {"Education_PhD", "Marital_Status_Widow"} <= set(features.columns)
    assert "Response" not in features.columns
    assert len(labels) == len(features)
    assert all(pd.api.types.is_numeric_dtype(features[c]) for c in features.columns)
    # 4 non-baseline education levels + 4 non-baseline marital levels
    assert len(schema.indicator_columns) == 8


def test_encode_holdout_zero_fills_training_only_indicator(cleaned):
    train, hold = cleaned
    features, _, schema = encode_training(train, CATS, "Response")
    encoded, filled = encode_holdout(hold, schema)

    assert filled == ["Marital_Status_Widow"]
    assert list(encoded.columns) == list(features.columns)
    assert (encoded["Marital_Status_Widow"] == 0).all()
    assert len(encoded) == len(hold)


def test_encode_holdout_rejects_level_unknown_to_training(cleaned):
    train, hold = cleaned
    _, _, schema = encode_training(train, CATS, "Response")
    hold = hold.copy()
    hold["Marital_Status"] = hold["Marital_Status"].astype(str)
    hold.loc[hold.index[0], "Marital_Status"] = "YOLO"

    with pytest.raises(SchemaMismatchError, match="Marital_Status_YOLO"):
        encode_holdout(hold, schema)


def test_encode_holdout_drops_response_column(cleaned):
    train, hold = cleaned
    features, _, schema = encode_training(train, CATS, "Response")
    hold = hold.assign(Response=0)

    encoded, _ = encode_holdout(hold, schema)
    assert "Response" not in encoded.columns
    assert list(encoded.columns) == list(features.columns)


def test_encode_holdout_requires_categorical_columns(cleaned):
    train, hold = cleaned
    _, _, schema = encode_training(train, CATS, "Response")
    with pytest.raises(MissingColumnsError):
        encode_holdout(hold.drop(columns=["Education"]), schema)


def test_align_to_schema_refuses_missing_numeric_column(cleaned):
    train, hold = cleaned
    features, _, schema = encode_training(train, CATS, "Response")
    encoded, _ = encode_holdout(hold, schema)

    with pytest.raises(SchemaMismatchError, match="Recency"):
        align_to_schema(encoded.drop(columns=["Recency"]), schema)


def test_encode_training_rejects_text_columns(cleaned):
    train, _ = cleaned
    train = train.assign(Notes="free text")
    with pytest.raises(SchemaMismatchError, match="Notes"):
        encode_training(train, CATS, "Response")


def test_numeric_levels_match_when_training_column_has_gaps():
    train = pd.DataFrame(
        {
            "Kidhome": [0.0, 1.0, 2.0, None, 1.0, 0.0],
            "Income": [40000.0, 52000.0, 61000.0, 38000.0, 47000.0, 58000.0],
            "Response": ["Yes", "No", "No", "Yes", "No", "No"],
        }
    )
    hold = pd.DataFrame({"Kidhome": [0, 1, 2, 1], "Income": [41000.0, 50000.0, 60000.0, 45000.0]})

    features, _, schema = encode_training(train, ["Kidhome"], "Response")
    encoded, filled = encode_holdout(hold, schema)

    assert schema.baselines == {"Kidhome": "0"}
    assert list(features.columns) == ["Income", "Kidhome_1", "Kidhome_2"]
    assert list(encoded.columns) == list(features.columns)
    assert filled == []
    assert encoded["Kidhome_2"].tolist() == [0, 0, 1, 0]
