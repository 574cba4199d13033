"""Logging setup shared by the tray app and the vignette."""
from __future__ import annotations
import logging, os
from logging.handlers import RotatingFileHandler
from typing import Optional

FMT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(log_file: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """Attach a console handler and, if given, a rotating file handler."""
    root = logging.getLogger("water_quest")
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("  [%(levelname)s] %(message)s"))
    root.addHandler(console)

    if log_file:
        try:
            d = os.path.dirname(log_file)
            if d:
                os.makedirs(d, exist_ok=True)
            fh = RotatingFileHandler(log_file, maxBytes=256 * 1024, backupCount=3, encoding="utf-8")
            fh.setFormatter(logging.Formatter(FMT))
            root.addHandler(fh)
        except OSError as e:
            root.warning("Cannot open log file %s: %s", log_file, e)
    return root
