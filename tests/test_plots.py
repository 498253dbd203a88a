from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from campaign_response.src.evaluation.prediction import compute_roc
from campaign_response.src.explain.shap_analysis import compute_shap_values
from campaign_response.src.models.boosting import fit_boosted_classifier
from campaign_response.src.visualization.plots_model import (
    plot_feature_importance,
    plot_roc_curve,
    plot_shap_dependence,
    plot_shap_summary,
    plot_tuning_results,
)


def test_report_figures_are_saved(tmp_path, small_grid_config):
    rng = np.random.default_rng(9)
    x = pd.DataFrame({"Income": rng.normal(size=200), "Recency": rng.normal(size=200)})
    y = pd.Series(np.where(x["Income"] + rng.normal(scale=0.5, size=200) > 0.5, "Yes", "No"))
    model = fit_boosted_classifier(x, y, small_grid_config, random_state=0)
    analysis = compute_shap_values(model, x)

    figs = {
        "tuning.png": plot_tuning_results(model.cv_results),
        "importance.png": plot_feature_importance(model.feature_importance()),
        "summary.png": plot_shap_summary(analysis),
        "pair.png": plot_shap_dependence(analysis, "Income", "Recency"),
        "roc.png": plot_roc_curve(compute_roc(y, model.predict_positive_proba(x))),
    }
    for name, fig in figs.items():
        fig.savefig(tmp_path / name)
        plt.close(fig)
        assert (tmp_path / name).stat().st_size > 0

    fig = plot_roc_curve(compute_roc(y, model.predict_positive_proba(x)), save_path=tmp_path / "sub" / "roc.png")
    plt.close(fig)
    assert (tmp_path / "sub" / "roc.png").is_file()
