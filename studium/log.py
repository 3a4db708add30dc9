"""
Logging configuration: a console handler with a plain or JSON formatter.
"""

import json
import logging
import logging.config
from datetime import datetime
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""
    
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def build_logging_config(level: str = "INFO", json_output: bool = False) -> Dict[str, Any]:
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'plain': {'format': "%(asctime)s %(levelname)-8s %(name)s: %(message)s"},
            'json': {'()': JSONFormatter},
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'json' if json_output else 'plain',
                'stream': 'ext://sys.stderr',
            },
        },
        'loggers': {
            'studium': {'level': level.upper(), 'handlers': ['console'], 'propagate': False},
        },
    }


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    logging.config.dictConfig(build_logging_config(level, json_output))
