"""Source package for the campaign response modelling project.

Package layout
--------------
- data: loading, cleaning, imputation, outlier filtering, indicator encoding
- models: grid-searched gradient boosting and holdout scoring
- evaluation: ROC / AUC and report metrics
- explain: SHAP attributions
- visualization: report-ready figures
- experiments: the end-to-end runner
- utils: configuration, logging, seeds and ranking metrics

This ``__init__`` stays lightweight so that importing the package does not
pull in scikit-learn or shap.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "data",
    "models",
    "evaluation",
    "explain",
    "visualization",
    "experiments",
    "utils",
]
