"""
Logging configuration for production

Imported once by main.py when DEBUG is off: console output plus
``app.log`` (INFO and up) and ``error.log`` (errors only) under LOG_DIR.
"""
import logging
import sys
from pathlib import Path
from sebeta_mart.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logs_dir = Path(settings.LOG_DIR)
logs_dir.mkdir(parents=True, exist_ok=True)


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


level = logging.getLevelName(settings.LOG_LEVEL.upper())
if not isinstance(level, int):
    level = logging.INFO

root_logger = logging.getLogger()
root_logger.setLevel(level)
root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level))
root_logger.addHandler(_handler(logging.FileHandler(logs_dir / "app.log"), level))
root_logger.addHandler(_handler(logging.FileHandler(logs_dir / "error.log"), logging.ERROR))

# Reduce noise from third-party libraries
for noisy in ("uvicorn.access", "sqlalchemy.engine", "multipart"):
    logging.getLogger(noisy).setLevel(logging.WARNING)
