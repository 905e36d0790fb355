import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


def setup_logger(log_file: Union[str, Path] = "logs/focusflow.log", level: int = logging.INFO,
                 max_bytes: int = 10_000_000, backup_count: int = 5,
                 name: Optional[str] = None) -> logging.Logger:
    """Attach a rotating UTF-8 file handler to the root (or named) logger"""
    log_file = Path(log_file)
    log_file.parent.mkdir(exist_ok=True, parents=True)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == log_file.resolve():
            return logger

    handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
