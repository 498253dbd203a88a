"""Response model: grid-searched gradient boosting and holdout scoring.

- :func:`~campaign_response.src.models.boosting.fit_boosted_classifier`
  tunes a :class:`~sklearn.ensemble.GradientBoostingClassifier` by k-fold
  grid search on ROC AUC and returns a
  :class:`~campaign_response.src.models.boosting.TunedBoostingModel`.
- :func:`~campaign_response.src.models.scoring.score_holdout` appends the
  positive-class probability to the encoded holdout table.
"""

from __future__ import annotations

from .boosting import TunedBoostingModel, encode_labels, fit_boosted_classifier
from .scoring import PROBABILITY_COLUMN, score_holdout, write_scored_holdout

__all__ = [
    "TunedBoostingModel",
    "encode_labels",
    "fit_boosted_classifier",
    "PROBABILITY_COLUMN",
    "score_holdout",
    "write_scored_holdout",
]
