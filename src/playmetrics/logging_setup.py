from __future__ import annotations

import logging
import os

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> int:
    """Install the default log format for hosts that do not configure logging themselves.

    The level comes from the argument, then `LOG_LEVEL`, then INFO.
    """
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    level_value = getattr(logging, name, logging.INFO)
    logging.basicConfig(
        level=level_value,
        format=DEFAULT_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("playmetrics").setLevel(level_value)
    return level_value
