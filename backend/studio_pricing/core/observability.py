"""Logging setup for the pricing engine.

Environment knobs (prefixed ``STUDIO_PRICING_`` through :mod:`.config`):

- LOG_LEVEL (default: INFO): root logger level
- LOG_JSON (default: 1): emit structured JSON lines instead of plain text
"""

from __future__ import annotations

import logging
import os

from pythonjsonlogger.json import JsonFormatter

from .config import Settings, settings as default_settings

_FORMAT = "%(levelname)s %(name)s %(message)s"


def setup_logging(config: Settings | None = None) -> None:
    """Configure the root logger with a single stream handler."""
    config = config or default_settings
    handler = logging.StreamHandler()
    if config.LOG_JSON:
        formatter: logging.Formatter = JsonFormatter(_FORMAT)
    else:
        formatter = logging.Formatter(_FORMAT)
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers = [handler]
    # Process env wins over the settings file for quick local overrides
    level_name = (os.getenv("LOG_LEVEL") or config.LOG_LEVEL or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root.setLevel(level)
