"""Logging utilities"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

LOG_DIR = Path("logs")
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def get_logger(name):
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def _configure():
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(min(level, logging.DEBUG))

    if root.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)

    log_dir = Path(os.environ.get("QUICKAPPLY_LOG_DIR", LOG_DIR))
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"quickapply_{datetime.now().strftime('%Y-%m-%d')}.log"
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
        root.addHandler(fh)
    except OSError:
        pass


def set_console_level(level_name):
    """Re-apply LOG_LEVEL once .env has been loaded; the log file stays at DEBUG"""
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    for handler in logging.getLogger().handlers:
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)
