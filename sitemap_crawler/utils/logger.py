"""
Logging setup for sitemap crawler runs.
"""

import logging
import logging.handlers
import json
import sys
from pathlib import Path
from typing import Iterable, Optional
from datetime import datetime, timezone

from .config import LoggingConfig

LOG_FILE_MAX_BYTES = 50 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Loggers that are chatty at INFO during a crawl
THIRD_PARTY_LOGGERS = ('aiohttp', 'asyncio', 'urllib3', 'charset_normalizer')

# Record attributes a caller may attach with ``extra=`` that end up in JSON output
CRAWL_FIELDS = ('url', 'status', 'phase')


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'time': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'where': f"{record.module}:{record.funcName}:{record.lineno}",
        }

        for name in CRAWL_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value

        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class PerformanceFilter(logging.Filter):
    """Drops records from per-request aiohttp loggers."""

    def __init__(self, suppress_modules: Optional[Iterable[str]] = None):
        super().__init__()
        self.suppress_modules = tuple(suppress_modules or ('aiohttp.access', 'aiohttp.internal'))

    def filter(self, record: logging.LogRecord) -> bool:
        return not record.name.startswith(self.suppress_modules)


def _attach(root: logging.Logger, handler: logging.Handler, formatter: logging.Formatter):
    handler.setFormatter(formatter)
    handler.addFilter(PerformanceFilter())
    root.addHandler(handler)


def setup_logging(config: LoggingConfig) -> logging.Logger:
    """
    Configure the root logger for a crawl run.

    Console output always goes to stdout. When ``config.file`` is set a
    rotating file handler is added as well; both share one formatter.
    Handlers from a previous call are replaced.

    Args:
        config: Logging section of the crawler configuration

    Returns:
        The root logger
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    root.handlers.clear()

    formatter = JSONFormatter() if config.json else logging.Formatter(config.format)

    _attach(root, logging.StreamHandler(sys.stdout), formatter)

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(root, logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding='utf-8'
        ), formatter)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug(f"Logging configured at {config.level}"
               + (f", writing to {config.file}" if config.file else ""))
    return root
