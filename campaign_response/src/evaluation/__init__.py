"""Evaluation utilities for the response model.

- ROC curve and AUC with an explicit positive label;
- classification metrics (AUC / log-loss / Brier / thresholded scores);
- a one-row report table including lift at a targeting budget.
"""

from __future__ import annotations

from .prediction import (
    RocResult,
    compute_classification_metrics,
    compute_roc,
    metrics_report,
)

__all__ = [
    "RocResult",
    "compute_roc",
    "compute_classification_metrics",
    "metrics_report",
]
