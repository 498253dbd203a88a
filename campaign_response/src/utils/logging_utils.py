"""Logging setup shared by the pipeline runner and the data check CLI.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by whichever entry point runs. The pipeline runner uses
it to mirror stderr into ``<output_dir>/logs/run.log`` so each run keeps its
own record of cleaning counts, grid-search results, imputation warnings and
data errors. ``check_data`` calls it without a file for console-only output.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    logger_name: Optional[str] = None,
    *,
    force: bool = True,
    capture_warnings: bool = True,
) -> logging.Logger:
    """Attach a stderr handler (and optionally a file handler) to a logger.

    Parameters
    ----------
    level:
        Log level for the logger and its handlers.
    log_file:
        Optional log file. Parent directories are created on demand.
    logger_name:
        Logger to configure; ``None`` configures the root logger so that every
        ``campaign_response`` module logger is captured.
    force:
        Remove existing handlers first, so repeated calls (tests, notebooks)
        do not duplicate output.
    capture_warnings:
        Route :mod:`warnings` (pandas / scikit-learn) through logging.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    if force:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    console_handler = logging.StreamHandler(stream=sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if logger_name is not None:
        logger.propagate = False

    if capture_warnings:
        logging.captureWarnings(True)

    return logger


__all__ = ["configure_logging", "DEFAULT_LOG_FORMAT"]
