"""Model explanation via SHAP attributions."""

from __future__ import annotations

from .shap_analysis import ShapAnalysis, compute_shap_values, rank_by_mean_abs

__all__ = ["ShapAnalysis", "compute_shap_values", "rank_by_mean_abs"]
