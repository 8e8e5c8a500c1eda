from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level_name: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure root logging once: console always, rotating file when a path is given."""
    global _configured
    if _configured:
        return

    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(formatter)
    ch.setLevel(level)
    root.addHandler(ch)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        # rotate at 5MB, keep 7 backups
        fh = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=7, encoding="utf-8")
        fh.setFormatter(formatter)
        fh.setLevel(level)
        root.addHandler(fh)

    _configured = True
    logging.getLogger(__name__).info("Logging initialized at %s; file: %s", logging.getLevelName(level), log_file or "-")
