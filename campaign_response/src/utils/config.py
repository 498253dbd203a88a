"""Run configuration and its YAML loader.

A run is fully described by :class:`PipelineConfig`. Values come from, in
increasing priority: dataclass defaults, ``configs/pipeline.yaml`` (or any
YAML passed via ``--config``), and CLI flags applied by the runner.

YAML layout::

    pipeline:
      primary_path: data/marketing_campaign.csv
      random_state: 42
      ...
      boosting:
        cv_folds: 5
        n_estimators: [100, 200, 300]
        ...

Unknown keys are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("campaign_response/configs/pipeline.yaml")


@dataclass
class BoostingConfig:
    """Grid-search setup for the gradient-boosted classifier.

    Parameters
    ----------
    n_estimators / learning_rate / max_depth:
        Hyperparameter grid searched by cross-validation.
    subsample / min_samples_leaf:
        Fixed tree parameters shared by every grid point.
    cv_folds:
        Number of stratified folds.
    scoring:
        Selection metric passed to :class:`~sklearn.model_selection.GridSearchCV`.
    n_jobs:
        Parallel fold evaluation (delegated to scikit-learn).
    """

    n_estimators: List[int] = field(default_factory=lambda: [100, 200, 300])
    learning_rate: List[float] = field(default_factory=lambda: [0.01, 0.05, 0.1])
    max_depth: List[int] = field(default_factory=lambda: [1, 3, 5])
    subsample: float = 1.0
    min_samples_leaf: int = 10
    cv_folds: int = 5
    scoring: str = "roc_auc"
    n_jobs: Optional[int] = None

    def param_grid(self) -> Dict[str, List[Any]]:
        return {
            "n_estimators": [int(v) for v in self.n_estimators],
            "learning_rate": [float(v) for v in self.learning_rate],
            "max_depth": [int(v) for v in self.max_depth],
        }


@dataclass
class PipelineConfig:
    """Everything one pipeline run needs."""

    # Inputs / outputs
    primary_path: Optional[str] = None
    holdout_path: Optional[str] = None
    output_dir: str = "campaign_response/outputs"
    scored_filename: str = "Holdout_Scored.csv"

    # Columns
    id_col: str = "ID"
    response_col: str = "Response"
    income_col: str = "Income"
    date_col: str = "Dt_Customer"
    categorical_cols: List[str] = field(default_factory=lambda: ["Education", "Marital_Status"])

    # Cleaning
    date_format: str = "%m/%d/%Y"
    strict_dates: bool = True
    reference_date: str = "2014-06-29"
    iqr_k: float = 1.5
    holdout_imputation: str = "train"  # "train" or "own"

    # Split / seeds
    test_size: float = 0.2
    random_state: int = 42

    # Explanation
    shap_pair: Tuple[str, str] = ("Income", "Recency")
    shap_top_k: int = 4

    boosting: BoostingConfig = field(default_factory=BoostingConfig)

    def __post_init__(self) -> None:
        if self.holdout_imputation not in {"train", "own"}:
            raise ValueError(
                f"holdout_imputation must be 'train' or 'own', got {self.holdout_imputation!r}."
            )
        self.shap_pair = tuple(self.shap_pair)  # type: ignore[assignment]
        if len(self.shap_pair) != 2:
            raise ValueError(f"shap_pair must name exactly two features, got {self.shap_pair}.")

    @property
    def required_columns(self) -> List[str]:
        """Columns every input table must carry."""
        return [self.income_col, self.date_col, *self.categorical_cols]

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)


def _known(cls: type, raw: Dict[str, Any]) -> Dict[str, Any]:
    valid = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - valid)
    if unknown:
        logger.debug("Ignoring unknown %s keys: %s", cls.__name__, unknown)
    return {k: v for k, v in raw.items() if k in valid}


def config_from_dict(raw: Dict[str, Any]) -> PipelineConfig:
    """Build a :class:`PipelineConfig` from a (possibly partial) mapping."""
    section = dict(raw.get("pipeline", raw) or {})
    boosting_raw = section.pop("boosting", None) or {}

    kwargs = _known(PipelineConfig, section)
    kwargs["boosting"] = BoostingConfig(**_known(BoostingConfig, boosting_raw))
    return PipelineConfig(**kwargs)


def load_config(config_path: Optional[Union[str, Path]] = None) -> PipelineConfig:
    """Load a :class:`PipelineConfig` from YAML, falling back to defaults."""
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.is_file():
        logger.warning("Config file not found at %s; using PipelineConfig defaults.", path)
        return PipelineConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level.")
    return config_from_dict(raw)


__all__ = [
    "BoostingConfig",
    "PipelineConfig",
    "DEFAULT_CONFIG_PATH",
    "config_from_dict",
    "load_config",
]
