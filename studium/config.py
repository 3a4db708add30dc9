"""
Configuration loading.

Settings are layered: built-in defaults, then an optional JSON file, then
``STUDIUM_*`` environment variables.
"""

import json
import logging
import os
from typing import Any, Dict, Mapping, Optional

from .core.exceptions import ConfigurationError, ValidationError
from .core.grading import GradingStrategy


DEFAULT_CONFIG: Dict[str, Any] = {
    'host': "127.0.0.1",
    'port': 8000,
    'default_grading_strategy': GradingStrategy.UNWEIGHTED_MEAN.value,
    'log_level': "INFO",
}

ENV_PREFIX = "STUDIUM_"


def load_config(path: Optional[str] = None,
                env: Optional[Mapping[str, str]] = None,
                overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Build and validate the effective configuration.

    ``overrides`` (e.g. command-line flags) win over every other layer;
    ``None`` values in it are ignored.
    """
    env = os.environ if env is None else env
    config = dict(DEFAULT_CONFIG)
    
    if path:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}",
                                     error_code="BAD_CONFIG_FILE", details={'path': path}) from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object",
                                     error_code="BAD_CONFIG_FILE", details={'path': path})
        config.update(file_config)
    
    for key in DEFAULT_CONFIG:
        value = env.get(ENV_PREFIX + key.upper())
        if value is not None:
            config[key] = value
    
    for key, value in (overrides or {}).items():
        if value is not None:
            config[key] = value
    
    return _validate(config)


def _validate(config: Dict[str, Any]) -> Dict[str, Any]:
    try:
        port = int(config['port'])
    except (TypeError, ValueError):
        port = -1
    if not 0 < port < 65536:
        raise ConfigurationError(f"Invalid port: {config['port']!r}", error_code="BAD_PORT")
    config['port'] = port
    
    try:
        GradingStrategy.parse(str(config['default_grading_strategy']))
    except ValidationError as e:
        raise ConfigurationError(e.message, error_code="BAD_STRATEGY") from e
    
    log_level = str(config['log_level']).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Invalid log level: {config['log_level']!r}",
                                 error_code="BAD_LOG_LEVEL")
    config['log_level'] = log_level
    return config
