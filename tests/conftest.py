from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

EDUCATION_LEVELS = ["Graduation", "PhD", "Master", "2n Cycle", "Basic"]
EDUCATION_P = [0.5, 0.22, 0.17, 0.08, 0.03]
MARITAL_LEVELS = ["Married", "Together", "Single", "Divorced", "Widow"]
MARITAL_P = [0.39, 0.26, 0.21, 0.1, 0.04]


def make_customers(
    n: int = 400,
    seed: int = 0,
    *,
    with_response: bool = True,
    n_missing_income: int = 0,
    n_income_outliers: int = 0,
    n_duplicates: int = 0,
    exclude_levels: Optional[Dict[str, Sequence[str]]] = None,
    id_offset: int = 0,
) -> pd.DataFrame:
    """Synthetic customer table shaped like the marketing campaign export."""
    rng = np.random.default_rng(seed)

    marital_levels, marital_p = list(MARITAL_LEVELS), np.array(MARITAL_P)
    education_levels, education_p = list(EDUCATION_LEVELS), np.array(EDUCATION_P)
    for col, levels in (exclude_levels or {}).items():
        if col == "Marital_Status":
            keep = [i for i, lvl in enumerate(marital_levels) if lvl not in levels]
            marital_levels = [marital_levels[i] for i in keep]
            marital_p = marital_p[keep]
        elif col == "Education":
            keep = [i for i, lvl in enumerate(education_levels) if lvl not in levels]
            education_levels = [education_levels[i] for i in keep]
            education_p = education_p[keep]

    education = rng.choice(education_levels, size=n, p=education_p / education_p.sum())
    marital = rng.choice(marital_levels, size=n, p=marital_p / marital_p.sum())
    # Make sure every remaining level is observed at least once.
    marital[: len(marital_levels)] = marital_levels
    education[len(marital_levels) : len(marital_levels) + len(education_levels)] = education_levels

    income = rng.normal(52000, 18000, size=n).clip(2000, None).round(0)
    recency = rng.integers(0, 100, size=n)
    kidhome = rng.integers(0, 3, size=n)
    teenhome = rng.integers(0, 3, size=n)
    year_birth = rng.integers(1945, 2000, size=n)
    start = pd.Timestamp("2012-07-30")
    enrolled = start + pd.to_timedelta(rng.integers(0, 699, size=n), unit="D")
    wines = rng.gamma(1.5, 200, size=n).round(0)
    meat = rng.gamma(1.2, 120, size=n).round(0)
    web = rng.integers(0, 12, size=n)
    store = rng.integers(0, 13, size=n)
    visits = rng.integers(0, 10, size=n)

    df = pd.DataFrame(
        {
            "ID": np.arange(n) + 1 + id_offset,
            "Year_Birth": year_birth,
            "Education": education,
            "Marital_Status": marital,
            "Income": income,
            "Kidhome": kidhome,
            "Teenhome": teenhome,
            "Dt_Customer": enrolled.strftime("%m/%d/%Y"),
            "Recency": recency,
            "MntWines": wines,
            "MntMeatProducts": meat,
            "NumWebPurchases": web,
            "NumStorePurchases": store,
            "NumWebVisitsMonth": visits,
        }
    )

    if with_response:
        logit = (
            -1.6
            + 0.00004 * (income - 52000)
            - 0.03 * (recency - 50)
            + 0.8 * (education == "PhD")
            - 0.5 * (kidhome + teenhome)
            + 0.002 * (wines - 300)
        )
        prob = 1.0 / (1.0 + np.exp(-logit))
        df["Response"] = (rng.random(n) < prob).astype(int)

    if n_income_outliers:
        df.loc[df.index[-n_income_outliers:], "Income"] = 666666.0
    if n_missing_income:
        idx = rng.choice(np.arange(len(marital_levels) + len(education_levels), n - n_income_outliers),
                         size=n_missing_income, replace=False)
        df.loc[idx, "Income"] = np.nan
    if n_duplicates:
        df = pd.concat([df, df.iloc[:n_duplicates]], ignore_index=True)

    return df


@pytest.fixture
def customer_factory() -> Callable[..., pd.DataFrame]:
    return make_customers


@pytest.fixture
def primary_df() -> pd.DataFrame:
    return make_customers(n=600, seed=1, n_missing_income=5, n_income_outliers=3, n_duplicates=4)


@pytest.fixture
def holdout_df() -> pd.DataFrame:
    return make_customers(
        n=200,
        seed=2,
        with_response=False,
        n_missing_income=2,
        exclude_levels={"Marital_Status": ["Widow"]},
        id_offset=10000,
    )


@pytest.fixture
def small_grid_config():
    from campaign_response.src.utils.config import BoostingConfig

    return BoostingConfig(
        n_estimators=[20, 40],
        learning_rate=[0.1],
        max_depth=[2],
        cv_folds=3,
    )
