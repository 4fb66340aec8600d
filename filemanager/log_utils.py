import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "filemanager"
STDERR_ENV_VAR = "FILEMANAGER_LOG_STDERR"


def setup_logger(
    path: Optional[Path] = None,
    name: str = LOGGER_NAME,
    level: str = "INFO",
    max_bytes: int = 2_000_000,
    backups: int = 3,
) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # stdout belongs to the shell, so diagnostics never propagate to a root handler
    logger.propagate = False
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(path, encoding="utf-8", maxBytes=max_bytes, backupCount=backups)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    if os.environ.get(STDERR_ENV_VAR) == "1":
        sh = logging.StreamHandler()
        sh.setFormatter(fmt)
        logger.addHandler(sh)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


def get_logger(suffix: str = "") -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{suffix}" if suffix else LOGGER_NAME)
