# icb_backend/app/utils/logs.py
from __future__ import annotations

import logging

from icb_backend.app.config import LOG_LEVEL


def get_logger(name: str) -> logging.Logger:
    """
    Named `icb.*` logger with a stream handler attached once.
    Level comes from ICB_LOG_LEVEL (INFO unless DEBUG is set).
    """
    log = logging.getLogger(f"icb.{name}")
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        log.addHandler(handler)
        log.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return log
