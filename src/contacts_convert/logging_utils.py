from __future__ import annotations

import logging
import os
from typing import Optional

from .config_loader import ConverterConfig

LOG_LEVEL_ENV = "CONTACTS_CONVERT_LOG_LEVEL"
DEFAULT_LEVEL = logging.WARNING
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _resolve_level(level_name: Optional[str]) -> int:
    """Map a level name ("debug") or number ("10") to a level; unknown names give WARNING."""
    candidate = (level_name or "").strip().upper()
    if not candidate:
        return DEFAULT_LEVEL
    if candidate.isdigit():
        return int(candidate)
    level = logging.getLevelName(candidate)
    return level if isinstance(level, int) else DEFAULT_LEVEL


def configure_logging(config: ConverterConfig, level_override: Optional[str] = None) -> None:
    """
    Set the root level used by the csv-to-vcf, vcf-to-csv and split commands.

    The environment variable wins over ``--log-level``, which wins over
    ``logging.level`` in the YAML config. Core parsers log record counts at
    DEBUG; the commands log mapping choices and saved paths at INFO.
    """
    level = _resolve_level(os.getenv(LOG_LEVEL_ENV) or level_override or config.logging.level)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)
