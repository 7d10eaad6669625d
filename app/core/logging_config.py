import logging
import logging.config
import os
from datetime import datetime
from app.core.config import settings

LOG_FORMATS = {
    "default": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s:%(lineno)d - %(message)s",
    "access": "%(asctime)s - %(message)s",
}

MAX_LOG_BYTES = 10485760  # 10MB


def _file_handler(folder: str, level: str, formatter: str, current_date: str) -> dict:
    """Rotating daily file under <LOG_DIR>/<folder>/"""
    directory = os.path.join(settings.LOG_DIR, folder)
    os.makedirs(directory, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": os.path.join(directory, f"{folder}-{current_date}.log"),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": 10,
    }


def _logger(level: str, handlers: list) -> dict:
    return {"level": level, "handlers": handlers, "propagate": False}


def setup_logging():
    """Setup application logging configuration"""

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
    }
    root_handlers = ["console"]
    access_handlers = ["console"]

    if settings.LOG_TO_FILE:
        current_date = datetime.now().strftime("%Y-%m-%d")
        handlers["app_file"] = _file_handler("app", settings.LOG_LEVEL, "detailed", current_date)
        handlers["error_file"] = _file_handler("error", "ERROR", "detailed", current_date)
        handlers["access_file"] = _file_handler("access", "INFO", "access", current_date)
        root_handlers = ["console", "app_file", "error_file"]
        access_handlers = ["access_file"]

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"}
            for name, fmt in LOG_FORMATS.items()
        },
        "handlers": handlers,
        "loggers": {
            "": _logger(settings.LOG_LEVEL, root_handlers),
            "access": _logger("INFO", access_handlers),
            "uvicorn.access": _logger("INFO", access_handlers),
            # Reduce DB query noise
            "sqlalchemy.engine": _logger("WARNING", root_handlers),
        },
    })

    logger = logging.getLogger(__name__)
    logger.info("🚀 Marketplace back office - Logging configured")
    logger.info(f"📝 Log level: {settings.LOG_LEVEL}")
    if settings.LOG_TO_FILE:
        logger.info(f"🗂️  Logs directory: {settings.LOG_DIR}/")
