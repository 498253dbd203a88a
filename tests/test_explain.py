from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from campaign_response.src.explain.shap_analysis import (
    _positive_class,
    compute_shap_values,
    rank_by_mean_abs,
)
from campaign_response.src.models.boosting import fit_boosted_classifier


@pytest.fixture
def fitted(small_grid_config):
    rng = np.random.default_rng(5)
    n = 300
    x = pd.DataFrame(
        {
            "Income": rng.normal(50000, 15000, size=n),
            "Recency": rng.integers(0, 100, size=n),
            "Kidhome": rng.integers(0, 3, size=n),
        }
    )
    logit = 0.0001 * (x["Income"] - 50000) - 0.05 * (x["Recency"] - 50)
    y = pd.Series(np.where(rng.random(n) < 1 / (1 + np.exp(-logit)), "Yes", "No"))
    return fit_boosted_classifier(x, y, small_grid_config, random_state=0), x


def test_shap_values_cover_every_row_and_feature(fitted):
    model, x = fitted
    analysis = compute_shap_values(model, x)

    assert analysis.values.shape == x.shape
    assert list(analysis.values.columns) == model.feature_names
    assert list(analysis.values.index) == list(x.index)


def test_shap_values_add_up_to_log_odds(fitted):
    model, x = fitted
    analysis = compute_shap_values(model, x)

    reconstructed = analysis.base_value + analysis.values.sum(axis=1).to_numpy()
    np.testing.assert_allclose(reconstructed, model.estimator.decision_function(x), atol=1e-4)


def test_importance_ranking_by_mean_abs(fitted):
    model, x = fitted
    analysis = compute_shap_values(model, x)

    expected = analysis.values.abs().mean().sort_values(ascending=False)
    assert list(analysis.importance.index) == list(expected.index)
    assert analysis.top_features(2) == list(expected.index[:2])
    assert "Kidhome" not in analysis.top_features(2)


def test_rank_by_mean_abs_simple():
    values = pd.DataFrame({"a": [1.0, -1.0], "b": [-3.0, 3.0], "c": [0.0, 0.5]})
    ranked = rank_by_mean_abs(values)
    assert list(ranked.index) == ["b", "a", "c"]
    assert ranked["b"] == pytest.approx(3.0)


def test_positive_class_handles_explainer_output_variants():
    two_d = np.ones((4, 3))
    as_list = [np.zeros((4, 3)), two_d]
    three_d = np.stack([np.zeros((4, 3)), two_d], axis=-1)

    for raw in (two_d, as_list, three_d):
        np.testing.assert_array_equal(_positive_class(raw, n_features=3), two_d)

    with pytest.raises(ValueError):
        _positive_class(np.ones((4, 2)), n_features=3)
