from __future__ import annotations

import pytest

from campaign_response.src.data.errors import MissingColumnsError, ResponseDataError
from campaign_response.src.data.load import load_datasets, load_table, require_columns


def test_load_table_comma(tmp_path, customer_factory):
    df = customer_factory(n=50, seed=3)
    path = tmp_path / "primary.csv"
    df.to_csv(path, index=False)

    loaded = load_table(path)
    assert list(loaded.columns) == list(df.columns)
    assert len(loaded) == 50


def test_load_table_falls_back_to_detected_delimiter(tmp_path, customer_factory):
    df = customer_factory(n=50, seed=3)
    path = tmp_path / "primary_semicolon.csv"
    df.to_csv(path, index=False, sep=";")

    loaded = load_table(path)
    assert list(loaded.columns) == list(df.columns)


def test_load_table_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_table(tmp_path / "nope.csv")


def test_require_columns_reports_all_missing(customer_factory):
    df = customer_factory(n=20, seed=0).drop(columns=["Income", "Recency"])
    with pytest.raises(MissingColumnsError) as info:
        require_columns(df, ["Income", "Recency", "ID"], table="primary")

    assert info.value.missing == ["Income", "Recency"]
    assert isinstance(info.value, KeyError)
    assert isinstance(info.value, ResponseDataError)
    assert "primary" in str(info.value)


def test_load_datasets_checks_holdout_schema(tmp_path, customer_factory):
    primary = customer_factory(n=40, seed=1)
    holdout = customer_factory(n=40, seed=2, with_response=False).drop(columns=["Dt_Customer"])
    primary.to_csv(tmp_path / "p.csv", index=False)
    holdout.to_csv(tmp_path / "h.csv", index=False)

    with pytest.raises(MissingColumnsError) as info:
        load_datasets(
            tmp_path / "p.csv",
            tmp_path / "h.csv",
            primary_required=["Income", "Dt_Customer", "Response"],
            holdout_required=["Income", "Dt_Customer"],
        )
    assert info.value.table == "holdout"
