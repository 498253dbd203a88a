from __future__ import annotations

import logging

from campaign_response.src.utils.logging_utils import configure_logging


def test_configure_logging_writes_run_log(tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    logger = configure_logging(log_file=log_file, logger_name="campaign_response.test_run")
    logger.getChild("preprocess").info("Dropped %d duplicate rows", 3)

    for handler in logger.handlers:
        handler.flush()
    assert "Dropped 3 duplicate rows" in log_file.read_text(encoding="utf-8")


def test_configure_logging_does_not_stack_handlers(tmp_path):
    name = "campaign_response.test_repeat"
    configure_logging(log_file=tmp_path / "a.log", logger_name=name)
    logger = configure_logging(level=logging.WARNING, logger_name=name)

    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    assert logger.propagate is False
