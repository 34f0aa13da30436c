from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from .paths import log_dir


def setup_logging(debug: bool = False) -> logging.Logger:
    log = logging.getLogger("arenaqr")
    if getattr(log, "_configured", False):  # idempotent
        return log

    level = logging.DEBUG if debug else logging.INFO
    log.setLevel(level)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    log.addHandler(ch)

    # File (rotating)
    logs = log_dir()
    logs.mkdir(parents=True, exist_ok=True)
    fh = RotatingFileHandler(logs / "arenaqr.log", maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)
    log.addHandler(fh)

    # httpx logs every request at INFO; PIL is chatty while probing plugins
    for name in ("httpx", "httpcore", "PIL"):
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    setattr(log, "_configured", True)
    log.debug("Logging initialized. Debug=%s log_file=%s", debug, logs / "arenaqr.log")
    return log
