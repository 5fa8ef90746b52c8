from __future__ import annotations

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "EMITTER_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level_name: Optional[str], default_level: int = logging.INFO) -> int:
    """Turn a level name ("debug") or number ("10") into a logging level.

    Unknown names fall back to ``default_level``.
    """
    if not level_name:
        return default_level
    level_name = level_name.strip()
    if level_name.isdigit():
        return int(level_name)
    level = getattr(logging, level_name.upper(), None)
    return level if isinstance(level, int) else default_level


def configure_logging(default_level: int = logging.INFO) -> int:
    """Configure the root logger for applications embedding the emitter.

    Respects the EMITTER_LOG_LEVEL env var if present and returns the level used.
    """
    level = resolve_level(os.getenv(LOG_LEVEL_ENV), default_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("emitter").setLevel(level)
    return level
