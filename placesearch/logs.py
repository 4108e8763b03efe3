"""Logging setup shared by the HTTP app and the terminal client."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    # ``force=True`` replaces handlers installed by uvicorn so our records share one format.
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    # httpx logs every request at INFO; keep it quieter than our own request logs.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return level
