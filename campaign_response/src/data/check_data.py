"""CLI utility to verify the primary and holdout files before a run.

Run from the project root:

.. code-block:: bash

    python -m campaign_response.src.data.check_data --config campaign_response/configs/pipeline.yaml

The files are only read, never modified.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from campaign_response.src.utils.config import DEFAULT_CONFIG_PATH, PipelineConfig, load_config
from campaign_response.src.utils.logging_utils import configure_logging

from .load import load_table


def check_file(path: Optional[str], required: Sequence[str], cfg: PipelineConfig, logger: logging.Logger) -> bool:
    """Log a short report for one file; return True if it is usable."""
    if path is None:
        logger.error("No path configured.")
        return False
    if not Path(path).is_file():
        logger.error("Missing file: %s", path)
        return False

    df = load_table(path)
    logger.info("Columns: %s", ", ".join(map(str, df.columns)))

    missing: List[str] = [c for c in required if c not in df.columns]
    if missing:
        logger.error("Missing required columns: %s", missing)
        return False

    n_dup = int(df.duplicated().sum())
    n_missing_income = int(df[cfg.income_col].isna().sum())
    logger.info("Duplicate rows: %d | missing %s: %d", n_dup, cfg.income_col, n_missing_income)

    dates = pd.to_datetime(df[cfg.date_col], format=cfg.date_format, errors="coerce")
    n_bad = int((df[cfg.date_col].notna() & dates.isna()).sum())
    if dates.notna().any():
        logger.info(
            "%s range (format %s): %s -> %s; unparseable: %d",
            cfg.date_col,
            cfg.date_format,
            dates.min().date(),
            dates.max().date(),
            n_bad,
        )
    else:
        logger.warning("%s could not be parsed with format %s.", cfg.date_col, cfg.date_format)
    return n_bad == 0 or not cfg.strict_dates


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check the primary/holdout files and their schema.")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path.")
    parser.add_argument("--primary", type=str, default=None, help="Override the primary file path.")
    parser.add_argument("--holdout", type=str, default=None, help="Override the holdout file path.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    logger = configure_logging(logger_name="campaign_response.check_data")
    args = _parse_args(argv)
    cfg = load_config(args.config)

    primary = args.primary or cfg.primary_path
    holdout = args.holdout or cfg.holdout_path

    logger.info("Primary file: %s", primary)
    ok_primary = check_file(primary, cfg.required_columns + [cfg.response_col], cfg, logger)
    logger.info("Holdout file: %s", holdout)
    ok_holdout = check_file(holdout, cfg.required_columns, cfg, logger)

    return 0 if (ok_primary and ok_holdout) else 1


if __name__ == "__main__":
    raise SystemExit(main())
