"""Project-wide utilities: configuration, logging, seeding and ranking metrics."""

from __future__ import annotations

from .config import BoostingConfig, PipelineConfig, config_from_dict, load_config
from .logging_utils import DEFAULT_LOG_FORMAT, configure_logging
from .metrics_utils import compute_lift, precision_at_frac, top_k_from_frac
from .seed_utils import set_global_seed

__all__ = [
    "BoostingConfig",
    "PipelineConfig",
    "config_from_dict",
    "load_config",
    "configure_logging",
    "DEFAULT_LOG_FORMAT",
    "set_global_seed",
    "compute_lift",
    "precision_at_frac",
    "top_k_from_frac",
]
