"""Budget-oriented ranking metrics.

A campaign usually contacts only the top-q% of customers by predicted
probability, so next to AUC we report how concentrated responders are in that
slice:

* ``precision_at_frac``: responder rate within the top-q%;
* ``compute_lift``: that rate divided by the overall responder rate.

Inputs are aligned by index when both are Series, and NaNs are dropped.
"""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np
import pandas as pd

ArrayLike = Union[pd.Series, Sequence[int], Sequence[float], np.ndarray]


def _aligned(y_true: ArrayLike, scores: ArrayLike) -> Tuple[pd.Series, pd.Series]:
    y = y_true.rename("y") if isinstance(y_true, pd.Series) else pd.Series(y_true, name="y")
    s = scores.rename("s") if isinstance(scores, pd.Series) else pd.Series(scores, name="s")
    if not (isinstance(y_true, pd.Series) and isinstance(scores, pd.Series)):
        if len(y) != len(s):
            raise ValueError(f"Length mismatch: y_true={len(y)} vs scores={len(s)}")
        y = y.reset_index(drop=True)
        s = s.reset_index(drop=True)
    df = pd.concat([pd.to_numeric(y, errors="coerce"), pd.to_numeric(s, errors="coerce")], axis=1).dropna()
    return df["y"], df["s"]


def top_k_from_frac(n: int, top_frac: float) -> int:
    """Number of rows in the top ``top_frac`` of ``n`` (ceil)."""
    if not (0.0 < float(top_frac) <= 1.0):
        raise ValueError(f"top_frac must be in (0, 1], got {top_frac}.")
    if n <= 0:
        return 0
    return int(np.ceil(n * float(top_frac)))


def precision_at_frac(y_true: ArrayLike, scores: ArrayLike, top_frac: float = 0.2) -> float:
    """Responder rate among the top ``top_frac`` ranked by ``scores``."""
    y, s = _aligned(y_true, scores)
    k = top_k_from_frac(len(y), top_frac)
    if k == 0:
        return float("nan")
    order = s.sort_values(ascending=False, kind="mergesort").index
    return float((y.loc[order].iloc[:k] > 0).mean())


def compute_lift(y_true: ArrayLike, scores: ArrayLike, top_frac: float = 0.2) -> float:
    """Lift@top-q: ``precision_at_frac / base_rate``."""
    y, s = _aligned(y_true, scores)
    if len(y) == 0:
        return float("nan")
    base_rate = float((y > 0).mean())
    if base_rate == 0.0:
        return float("nan")
    return precision_at_frac(y, s, top_frac=top_frac) / base_rate


__all__ = ["top_k_from_frac", "precision_at_frac", "compute_lift"]
