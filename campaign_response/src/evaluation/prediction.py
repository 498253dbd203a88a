"""Evaluation of response probabilities on the held-out test split.

Key APIs
--------
- :func:`compute_roc`: ROC curve and AUC with an explicit positive label.
- :func:`compute_classification_metrics`: AUC / log-loss / Brier plus
  thresholded accuracy, precision, recall and F1.
- :func:`metrics_report`: one-row report table, including lift at a
  budget fraction (see :mod:`campaign_response.src.utils.metrics_utils`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn import metrics

from campaign_response.src.data.preprocess import POSITIVE_LABEL
from campaign_response.src.utils.metrics_utils import compute_lift, precision_at_frac


# ---------------------------------------------------------------------------
# Array conversion helpers
# ---------------------------------------------------------------------------


def _binarize(y_true: Any, positive_label: Any = POSITIVE_LABEL) -> np.ndarray:
    """Return 1 where ``y_true`` equals the positive label, else 0.

    Numeric 0/1 labels are passed through (1 is positive).
    """
    arr = y_true.to_numpy() if isinstance(y_true, (pd.Series, pd.Index)) else np.asarray(y_true)
    arr = np.asarray(arr).reshape(-1)
    if arr.dtype.kind in "biuf":
        return (arr > 0).astype(int)
    return (arr.astype(str) == str(positive_label)).astype(int)


def _to_1d_proba(x: Any) -> np.ndarray:
    """Positive-class probabilities as a 1D float array.

    A two-column ``predict_proba`` output is reduced to its second column.
    """
    if isinstance(x, pd.DataFrame):
        if x.shape[1] != 1:
            raise ValueError(f"Expected a single probability column, got shape={x.shape}.")
        arr = x.iloc[:, 0].to_numpy(dtype=float)
    elif isinstance(x, pd.Series):
        arr = x.to_numpy(dtype=float)
    else:
        arr = np.asarray(x, dtype=float)
        if arr.ndim == 2:
            if arr.shape[1] != 2:
                raise ValueError(f"Ambiguous probability array shape={arr.shape}.")
            arr = arr[:, 1]
    return arr.reshape(-1)


def _pair(y_true: Any, y_prob: Any, positive_label: Any) -> Tuple[np.ndarray, np.ndarray]:
    y = _binarize(y_true, positive_label)
    p = _to_1d_proba(y_prob)
    if y.shape[0] != p.shape[0]:
        raise ValueError(f"Length mismatch: y_true={y.shape[0]} vs y_prob={p.shape[0]}")
    mask = np.isfinite(p)
    return y[mask], p[mask]


# ---------------------------------------------------------------------------
# ROC / AUC
# ---------------------------------------------------------------------------


@dataclass
class RocResult:
    """ROC curve points and the area under them."""

    fpr: np.ndarray
    tpr: np.ndarray
    thresholds: np.ndarray
    auc: float
    positive_label: Any = POSITIVE_LABEL

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"fpr": self.fpr, "tpr": self.tpr, "threshold": self.thresholds})


def compute_roc(
    y_true: Any,
    y_prob: Any,
    positive_label: Any = POSITIVE_LABEL,
) -> RocResult:
    """ROC curve of ``y_prob`` against ``y_true`` with ``positive_label`` as positive.

    Raises ``ValueError`` if ``y_true`` holds a single class (AUC undefined).
    """
    y, p = _pair(y_true, y_prob, positive_label)
    if np.unique(y).size < 2:
        raise ValueError("ROC AUC is undefined when y_true contains a single class.")

    fpr, tpr, thresholds = metrics.roc_curve(y, p, pos_label=1)
    return RocResult(
        fpr=fpr,
        tpr=tpr,
        thresholds=thresholds,
        auc=float(metrics.auc(fpr, tpr)),
        positive_label=positive_label,
    )


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


def compute_classification_metrics(
    y_true: Any,
    y_prob: Any,
    *,
    threshold: float = 0.5,
    positive_label: Any = POSITIVE_LABEL,
) -> Dict[str, Optional[float]]:
    """Probability and thresholded metrics for a binary response.

    Returns
    -------
    dict
        Keys: auc, log_loss, brier, accuracy, precision, recall, f1,
        support_pos, support_neg, threshold. ``auc`` is None for
        single-class inputs.
    """
    y, p = _pair(y_true, y_prob, positive_label)
    pred = (p >= float(threshold)).astype(int)

    auc: Optional[float]
    if np.unique(y).size < 2:
        auc = None
    else:
        auc = float(metrics.roc_auc_score(y, p))

    eps = 1e-15
    p_clip = np.clip(p, eps, 1.0 - eps)

    return {
        "auc": auc,
        "log_loss": float(metrics.log_loss(y, p_clip, labels=[0, 1])),
        "brier": float(metrics.brier_score_loss(y, p_clip)),
        "accuracy": float(metrics.accuracy_score(y, pred)),
        "precision": float(metrics.precision_score(y, pred, zero_division=0)),
        "recall": float(metrics.recall_score(y, pred, zero_division=0)),
        "f1": float(metrics.f1_score(y, pred, zero_division=0)),
        "support_pos": float(y.sum()),
        "support_neg": float((1 - y).sum()),
        "threshold": float(threshold),
    }


def metrics_report(
    y_true: Any,
    y_prob: Any,
    *,
    threshold: float = 0.5,
    top_frac: float = 0.2,
    positive_label: Any = POSITIVE_LABEL,
) -> pd.DataFrame:
    """One-row table with classification metrics and lift@top_frac."""
    y, p = _pair(y_true, y_prob, positive_label)
    row: Dict[str, Any] = compute_classification_metrics(
        y, p, threshold=threshold, positive_label=positive_label
    )
    row["top_frac"] = float(top_frac)
    row["precision_top"] = precision_at_frac(y, p, top_frac=top_frac)
    row["lift_top"] = compute_lift(y, p, top_frac=top_frac)
    return pd.DataFrame([row])


__all__ = [
    "RocResult",
    "compute_roc",
    "compute_classification_metrics",
    "metrics_report",
]
