"""
Configuration loader for the local inference service discovery
Loads and validates configuration from YAML files
"""

import shlex
import yaml
import logging
from typing import Dict, Any
from pathlib import Path
from datetime import datetime
import pytz

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"

def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration from YAML file with validation
    A missing file is not an error: every setting has a default
    """
    try:
        config_file = Path(config_path)
        if config_file.exists():
            with open(config_file, 'r') as f:
                config = yaml.safe_load(f) or {}
            logger.info(f"Configuration loaded from {config_path}")
        else:
            logger.warning(f"Configuration file not found: {config_path} - using defaults")
            config = {}

        if not isinstance(config, dict):
            raise ValueError(f"Configuration root must be a mapping: {config_path}")

        # Apply defaults first so validation sees complete sections
        config = _apply_defaults(config)
        _validate_config(config)

        return config

    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

def _as_command(value: Any, name: str) -> list:
    """Accept a list of strings or a shell-style string"""
    if isinstance(value, str):
        value = shlex.split(value)
    if not isinstance(value, list) or not value or not all(isinstance(v, str) and v for v in value):
        raise ValueError(f"{name} must be a non-empty command (list of strings or string)")
    return value

def _require_positive(section: Dict, key: str, section_name: str) -> None:
    value = section[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"{section_name}.{key} must be a positive number")

def _validate_config(config: Dict) -> None:
    """Validate configuration sections and value types"""
    for section in ['service', 'poll', 'network', 'cache', 'api', 'logging']:
        if not isinstance(config.get(section), dict):
            raise ValueError(f"Configuration section must be a mapping: {section}")

    # Validate service section
    service = config['service']
    service['start_command'] = _as_command(service['start_command'], 'service.start_command')
    service['status_command'] = _as_command(service['status_command'], 'service.status_command')
    _require_positive(service, 'status_timeout_seconds', 'service')

    # Validate poll section
    poll = config['poll']
    max_attempts = poll['max_attempts']
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ValueError("poll.max_attempts must be an integer >= 1")
    for key in ['interval_seconds', 'initial_delay_seconds', 'settle_delay_seconds', 'progress_log_every']:
        _require_positive(poll, key, 'poll')

    # Validate network section
    network = config['network']
    for key in ['verify_timeout_seconds', 'models_timeout_seconds']:
        _require_positive(network, key, 'network')
    if not str(network['models_path']).startswith('/'):
        raise ValueError("network.models_path must start with '/'")

    # Validate cache section
    _require_positive(config['cache'], 'ttl_hours', 'cache')

def _apply_defaults(config: Dict) -> Dict:
    """Apply default values to configuration"""

    defaults = {
        'service': {
            'start_command': ['foundry', 'service', 'start'],
            'status_command': ['foundry', 'service', 'status'],
            'status_timeout_seconds': 2
        },
        'poll': {
            'max_attempts': 60,
            'interval_seconds': 1,
            'initial_delay_seconds': 2,
            'settle_delay_seconds': 1,
            'progress_log_every': 5
        },
        'network': {
            'verify_timeout_seconds': 3,
            'models_timeout_seconds': 5,
            'models_path': '/v1/models'
        },
        'cache': {
            'directory': None,             # None: per-OS application data dir
            'file_name': 'endpoint-cache.json',
            'ttl_hours': 24
        },
        'api': {
            'enabled': False,
            'host': '127.0.0.1',
            'port': 8765
        },
        'logging': {
            'level': 'INFO',
            'file': None,
            'console_output': True,
            'timezone': 'UTC'
        }
    }

    for section, section_defaults in defaults.items():
        if config.get(section) is None:
            config[section] = {}
        if not isinstance(config[section], dict):
            continue  # reported by _validate_config
        for key, default_value in section_defaults.items():
            if key not in config[section]:
                config[section][key] = default_value

    return config

def get_sample_config() -> Dict:
    """Return a sample configuration for reference"""
    return {
        "service": {
            "start_command": ["foundry", "service", "start"],
            "status_command": ["foundry", "service", "status"],
            "status_timeout_seconds": 2
        },
        "poll": {
            "max_attempts": 60,
            "interval_seconds": 1,
            "initial_delay_seconds": 2,
            "settle_delay_seconds": 1,
            "progress_log_every": 5
        },
        "network": {
            "verify_timeout_seconds": 3,
            "models_timeout_seconds": 5,
            "models_path": "/v1/models"
        },
        "cache": {
            "directory": None,
            "file_name": "endpoint-cache.json",
            "ttl_hours": 24
        },
        "api": {
            "enabled": True,
            "host": "127.0.0.1",
            "port": 8765
        },
        "logging": {
            "level": "INFO",
            "file": "logs/local_service.log",
            "console_output": True,
            "timezone": "America/New_York"
        }
    }


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders timestamps in a configured timezone"""

    def __init__(self, fmt=None, tz_name: str = 'UTC'):
        super().__init__(fmt)
        try:
            self.tz = pytz.timezone(tz_name)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown logging timezone {tz_name!r}, using UTC")
            self.tz = pytz.utc

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            # Default format: YYYY-MM-DD HH:MM:SS TZ
            return dt.strftime('%Y-%m-%d %H:%M:%S %Z')

def setup_logging(config: Dict) -> None:
    """Setup logging based on configuration"""
    log_config = config.get('logging', {})
    level = log_config.get('level', 'INFO')

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = TimezoneFormatter(log_format, log_config.get('timezone') or 'UTC')

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Replace handlers from any earlier call
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    log_file = log_config.get('file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    logger.info(f"Logging configured: level={level}, console={log_config.get('console_output', True)}, file={log_file}")
