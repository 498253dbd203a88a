"""Report figures for the response model.

- hyperparameter tuning curves (CV AUC vs boosting rounds);
- impurity-based feature importance;
- SHAP summary and dependence plots;
- ROC curve with AUC.

Every function returns the matplotlib figure and optionally saves it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import shap

from campaign_response.src.evaluation.prediction import RocResult
from campaign_response.src.explain.shap_analysis import ShapAnalysis


def _maybe_save(fig: plt.Figure, save_path: str | Path | None) -> None:
    if save_path is None:
        return
    path = Path(save_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, bbox_inches="tight", dpi=200)


# ---------------------------------------------------------------------------
# Training diagnostics
# ---------------------------------------------------------------------------


def plot_tuning_results(
    cv_results: pd.DataFrame,
    metric_label: str = "ROC AUC (CV)",
    *,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """CV score vs boosting rounds, one panel per learning rate, one line per depth."""
    rates = sorted(cv_results["learning_rate"].unique())
    fig, axes = plt.subplots(
        1,
        len(rates),
        figsize=(4.5 * len(rates), 4),
        sharey=True,
        squeeze=False,
    )

    for ax, rate in zip(axes[0], rates):
        sub = cv_results[cv_results["learning_rate"] == rate]
        for depth, grp in sub.groupby("max_depth"):
            grp = grp.sort_values("n_estimators")
            ax.errorbar(
                grp["n_estimators"],
                grp["mean_test_score"],
                yerr=grp["std_test_score"],
                marker="o",
                capsize=3,
                label=f"max_depth={depth}",
            )
        ax.set_title(f"learning_rate={rate:g}")
        ax.set_xlabel("Boosting rounds")
        ax.grid(alpha=0.3)

    axes[0][0].set_ylabel(metric_label)
    axes[0][-1].legend(loc="lower right", fontsize=8)
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


def plot_feature_importance(
    importance: pd.Series,
    top_n: int = 20,
    title: str = "Variable importance",
    *,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """Horizontal bars of the ``top_n`` most important features."""
    top = importance.sort_values(ascending=False).head(int(top_n))[::-1]

    fig, ax = plt.subplots(figsize=(6, max(3.0, 0.3 * len(top) + 1)))
    ax.barh(top.index.astype(str), top.to_numpy(), color="tab:blue")
    ax.set_xlabel("Relative importance")
    ax.set_title(title)
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


# ---------------------------------------------------------------------------
# SHAP
# ---------------------------------------------------------------------------


def plot_shap_summary(
    analysis: ShapAnalysis,
    max_display: int = 20,
    *,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """Beeswarm summary of SHAP attributions across all records."""
    plt.figure()
    shap.summary_plot(
        analysis.values.to_numpy(),
        analysis.data,
        max_display=max_display,
        show=False,
    )
    fig = plt.gcf()
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


def plot_shap_dependence(
    analysis: ShapAnalysis,
    feature: str,
    interaction: Optional[str] = "auto",
    *,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """Attribution of ``feature`` against its value, coloured by ``interaction``."""
    if feature not in analysis.values.columns:
        raise KeyError(f"Feature '{feature}' not found in SHAP values.")

    fig, ax = plt.subplots(figsize=(5.5, 4))
    shap.dependence_plot(
        feature,
        analysis.values.to_numpy(),
        analysis.data,
        interaction_index=interaction,
        ax=ax,
        show=False,
    )
    ax.set_title(f"SHAP dependence: {feature}")
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def plot_roc_curve(
    roc: RocResult,
    title: str = "ROC curve",
    *,
    save_path: str | Path | None = None,
) -> plt.Figure:
    """ROC curve with AUC."""
    fig, ax = plt.subplots(figsize=(5.5, 4))
    label = f"AUC={roc.auc:.3f}" if np.isfinite(roc.auc) else "AUC=nan"
    ax.plot(roc.fpr, roc.tpr, label=label)
    ax.plot([0, 1], [0, 1], linestyle="--", linewidth=1, label="Random")
    ax.set_xlabel("False Positive Rate")
    ax.set_ylabel("True Positive Rate")
    ax.set_title(f"{title} (positive = {roc.positive_label})")
    ax.legend()
    fig.tight_layout()

    _maybe_save(fig, save_path)
    return fig


__all__ = [
    "plot_tuning_results",
    "plot_feature_importance",
    "plot_shap_summary",
    "plot_shap_dependence",
    "plot_roc_curve",
]
