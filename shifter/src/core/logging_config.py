#!/usr/bin/env python3
"""
Logging setup for the node pool shifter

Console output is colored by level unless disabled. Messages about a single
node pool go through a NodePoolLogger so every line names the pool it is
about, and each control cycle opens with a banner naming both pools.
"""

import logging
import sys
from typing import Optional
from pathlib import Path

NOISY_LOGGERS = ("urllib3", "kubernetes", "google", "uvicorn.access")


class ColoredFormatter(logging.Formatter):
    """Wraps the level name in an ANSI color"""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        # Color a copy so file handlers sharing the record keep plain level names
        record = logging.makeLogRecord(record.__dict__)
        levelcolor = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        record.levelname = f"{levelcolor}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


class NodePoolLogger(logging.LoggerAdapter):
    """
    Prefixes messages with the node pool they concern

    The pool name is also attached to the record as ``node_pool`` for
    handlers that want to filter or index on it.
    """

    def __init__(self, logger: logging.Logger, pool: str):
        super().__init__(logger, {"node_pool": pool})

    @property
    def pool(self) -> str:
        return self.extra["node_pool"]

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return f"Node pool {self.pool}: {msg}", kwargs


def pool_logger(logger: logging.Logger, pool: str) -> NodePoolLogger:
    return NodePoolLogger(logger, pool)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_colors: bool = True
) -> None:
    """
    Replace the root handlers with a console handler and an optional file handler

    Args:
        level: Level name, unknown names fall back to INFO
        log_file: Also write to this file, creating its directory
        enable_colors: Color level names on the console
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_format = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(
        ColoredFormatter(console_format) if enable_colors else logging.Formatter(console_format)
    )
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(file_format))
        root_logger.addHandler(file_handler)

    # Client libraries log every request at INFO
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {level} level")
    if log_file:
        logger.info(f"Log file: {log_file}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_cycle_banner(
    logger: logging.Logger,
    cycle: int,
    from_pool: str,
    to_pool: str,
    width: int = 72
) -> None:
    """Log the line opening a control cycle, e.g. '=== SHIFT CYCLE #3: a -> b ==='"""
    logger.info(f" SHIFT CYCLE #{cycle}: {from_pool} -> {to_pool} ".center(width, "="))


def log_section(logger: logging.Logger, title: str) -> None:
    """Log a sub-heading inside a control cycle"""
    logger.info(f"--- {title} ---")
