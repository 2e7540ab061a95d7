"""
Logging configuration for the transformation function
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

DEFAULT_LOGGER_NAME = 'firehose-processor'
TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class JsonFormatter(logging.Formatter):
    """Render each log record as a single JSON object"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'time': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname.lower(),
            'logger': record.name,
            'msg': record.getMessage(),
        }
        if record.exc_info:
            payload['error'] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = None, log_format: str = None) -> logging.Logger:
    """
    Set up process-wide logging

    Lambda installs its own root handler before our code runs, so the level
    is applied to every existing handler as well, and so is the JSON
    formatter when requested.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: 'text' (default) or 'json'

    Returns:
        Configured logger instance
    """
    if level is None:
        level = os.environ.get('LOG_LEVEL', 'INFO')
    if log_format is None:
        log_format = os.environ.get('LOG_FORMAT', 'text')
    resolved = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=resolved,
        format=TEXT_FORMAT,
        stream=sys.stdout
    )

    use_json = log_format.lower() == 'json'

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)
    for handler in root_logger.handlers:
        handler.setLevel(resolved)
        if use_json:
            handler.setFormatter(JsonFormatter())

    logger = get_logger()
    logger.setLevel(resolved)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance

    Args:
        name: Logger name (defaults to the service logger)
    """
    if name is None:
        name = DEFAULT_LOGGER_NAME

    return logging.getLogger(name)
