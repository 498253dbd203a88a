"""Matplotlib figures for tuning, importance, SHAP and ROC."""

from __future__ import annotations

from .plots_model import (
    plot_feature_importance,
    plot_roc_curve,
    plot_shap_dependence,
    plot_shap_summary,
    plot_tuning_results,
)

__all__ = [
    "plot_tuning_results",
    "plot_feature_importance",
    "plot_shap_summary",
    "plot_shap_dependence",
    "plot_roc_curve",
]
