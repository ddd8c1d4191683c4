"""Logging configuration for the CLI: one terse stream handler on stderr."""

from __future__ import annotations

import logging
import sys

from .config import LoggingConfig


class TextFormatter(logging.Formatter):
    """Terse format for interactive use: ``ossh: LEVEL: message``."""

    def __init__(self) -> None:
        super().__init__(fmt="ossh: %(levelname)s: %(message)s")


def configure_logging(config: LoggingConfig) -> None:
    """Set up the root logger based on configuration."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.level.upper(), logging.WARNING))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(TextFormatter())
    root.addHandler(handler)

    for noisy in ("boto3", "botocore", "urllib3", "s3transfer"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
