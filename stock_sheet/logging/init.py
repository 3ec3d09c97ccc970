from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for stock-sheet runs.

All output goes to stdout through the ``stock_sheet`` logger, one
``<LABEL> <message>`` line per event:

    INFO    sheet / issue-log / output paths, per-run block and row counts
    WARN    negative reconciled remain, a --day that does not exist
    ERROR   fatal config or fetch problems (the CLI then exits 1)
    SUMMARY the single closing line (see services/summary.py)
    DEBUG   per-day activity and every skipped row (--debug only)

SUMMARY sits between INFO and WARNING, so it is still printed when only
warnings would otherwise be shown. Module loggers are named after their
module (``stock_sheet.services.carry_forward`` ...) and reach stdout through
the one handler installed here.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "enable_debug",
    "get_logger",
    "log_summary",
    "reset_logging",
    "setup_logging",
]

LOGGER_NAME = "stock_sheet"
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``<LABEL> <message>``; unknown levels fall back to the level name."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        SUMMARY_LEVEL: "SUMMARY",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def _console_handler(stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    # 出力レベルは logger 側で制御 (--debug で logger のみ下げる)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(LabeledFormatter())
    return handler


def setup_logging() -> logging.Logger:
    """Install the stdout handler on the ``stock_sheet`` logger once per process.

    Calling it again returns the same logger without adding handlers;
    reset_logging() forces a fresh install (tests rebind stdout per test).
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.addHandler(_console_handler(sys.stdout))
    logger.setLevel(logging.INFO)
    # root logger に流すと pytest / 呼び出し側の設定で二重出力になる
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def enable_debug() -> logging.Logger:
    """Lower the application logger to DEBUG (--debug)."""
    logger = get_logger()
    logger.setLevel(logging.DEBUG)
    return logger


def log_summary(message: str) -> None:
    """Emit ``SUMMARY <message>``."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    global _logger
    _logger = None
