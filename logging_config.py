import json
import logging
import os
from logging.handlers import RotatingFileHandler

from config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_configured = False


class JsonFormatter(logging.Formatter):
    """Outputs log records as single-line JSON objects."""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "filename": record.filename,
            "lineno": record.lineno,
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def _resolve_log_dir(log_dir):
    """Create the log directory, falling back to the working directory."""
    if not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError:
            return '.'
    return log_dir


def _rotating_handler(path, level, max_bytes, backups, formatter):
    try:
        handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups)
    except OSError:
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(log_dir=None, log_format=None):
    """Attach console and rotating file handlers to the root logger.

    Calling this more than once is a no-op, so every entry point can call it.
    Returns the ``agroweather`` application logger.
    """
    global _configured
    app_logger = logging.getLogger('agroweather')
    if _configured:
        return app_logger

    log_dir = _resolve_log_dir(log_dir or Config.LOG_DIR)
    log_format = (log_format or Config.LOG_FORMAT or 'text').lower()

    if log_format == 'json':
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    # 5MB x 5 for the main log, 2MB x 3 for errors only
    file_handler = _rotating_handler(
        os.path.join(log_dir, 'agroweather.log'), logging.DEBUG, 5 * 1024 * 1024, 5, formatter
    )
    error_handler = _rotating_handler(
        os.path.join(log_dir, 'errors.log'), logging.ERROR, 2 * 1024 * 1024, 3, formatter
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)
    for handler in (file_handler, error_handler):
        if handler:
            root_logger.addHandler(handler)

    app_logger.setLevel(logging.DEBUG)

    # Reduce noise from third-party libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    _configured = True
    app_logger.info("AgroWeather logging initialized (%s format)", log_format)
    return app_logger
