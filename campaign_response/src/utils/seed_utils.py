"""Seeding for reproducible runs.

scikit-learn components receive an explicit ``random_state`` from the config;
this seeds the global generators that SHAP sampling and plotting may touch.
"""

from __future__ import annotations

import os
import random

import numpy as np


def set_global_seed(seed: int = 42) -> None:
    """Seed Python ``random``, NumPy and ``PYTHONHASHSEED``."""
    os.environ["PYTHONHASHSEED"] = str(int(seed))
    random.seed(int(seed))
    np.random.seed(int(seed))


__all__ = ["set_global_seed"]
