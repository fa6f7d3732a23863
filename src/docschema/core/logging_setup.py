#!/usr/bin/env python3
"""
Logging setup for the docschema CLI.

Library modules only create `logging.getLogger(__name__)` loggers; handlers
and levels are installed here, once, by the entry point.
"""

import logging
from typing import Any, Dict

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def resolve_level(level: str | int | None) -> int:
    """Map a level name (case-insensitive) or number to a logging level; unknowns -> WARNING."""
    if isinstance(level, int):
        return level
    if not level:
        return logging.WARNING
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(config: Dict[str, Any]) -> int:
    """
    Configure the root logger from `config['logging']['level']`.

    Returns the effective numeric level.
    """
    level = resolve_level((config.get("logging") or {}).get("level"))
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    return level
