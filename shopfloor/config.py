# shopfloor/config.py

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv, find_dotenv

from shopfloor.errors import ConfigError

logger = logging.getLogger(__name__)

# --- Database Configuration ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(BASE_DIR, "data")
DB_NAME = "shopfloor.db"
DATABASE_PATH = os.path.join(DATA_DIR, DB_NAME)

# --- Logging Configuration ---
LOGS_DIR = os.path.join(BASE_DIR, "logs")
LOG_FILE_NAME = "app.log"
LOG_FILE_PATH = os.path.join(LOGS_DIR, LOG_FILE_NAME)
LOG_LEVEL = logging.INFO
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'

# --- Application Settings ---
LOW_STOCK_THRESHOLD = 25

SQLITE_PREFIXES = ("sqlite://", "sqlite:")


def build_logging_config(level: int = LOG_LEVEL, log_file_path: str = LOG_FILE_PATH) -> Dict[str, Any]:
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': LOG_FORMAT,
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
                'level': level,
            },
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'formatter': 'standard',
                'filename': log_file_path,
                'maxBytes': 1024 * 1024 * 5,  # 5 MB
                'backupCount': 5,
                'level': logging.INFO,
                'encoding': 'utf-8',
            },
        },
        'root': {
            'handlers': ['console', 'file'],
            'level': level,
        },
    }


LOGGING_CONFIG = build_logging_config()


def ensure_directories(*paths: str) -> None:
    for path in paths or (DATA_DIR, LOGS_DIR):
        if path and not os.path.exists(path):
            os.makedirs(path)


def database_path_from_url(url: str) -> str:
    """Turns a DATABASE_URL into a filesystem path.

    Accepts ``sqlite://path``, ``sqlite:path`` or a bare path. Every repository
    call opens its own connection, so an in-memory database would lose its
    tables between calls and is rejected along with any non-sqlite scheme.
    """
    value = url.strip()
    if not value:
        raise ConfigError("DATABASE_URL is empty")
    for prefix in SQLITE_PREFIXES:
        if value.startswith(prefix):
            value = value[len(prefix):]
            break
    else:
        if "://" in value:
            raise ConfigError(f"Unsupported database scheme in DATABASE_URL: {url}")
    value = value.split("?", 1)[0]
    if not value or value in (":memory:", ":memory"):
        raise ConfigError("An in-memory database cannot be used; point DATABASE_URL at a file")
    return value


@dataclass
class AppConfig:
    """Application configuration data."""
    database_path: str = DATABASE_PATH
    log_level: int = LOG_LEVEL
    low_stock_threshold: int = LOW_STOCK_THRESHOLD

    @classmethod
    def load(cls) -> 'AppConfig':
        """
        Loads configuration from environment variables.

        A .env file is read first without overriding variables already set.
        Raises ConfigError if a variable is present but unusable.
        """
        dotenv_path = find_dotenv(usecwd=True)
        logger.debug(f"Attempting to load .env file from: {dotenv_path if dotenv_path else 'Not found'}")
        found_dotenv = load_dotenv(dotenv_path=dotenv_path, override=False)
        logger.debug(f".env file found: {found_dotenv}")

        url = os.environ.get("DATABASE_URL")
        level_name = os.environ.get("SHOPFLOOR_LOG_LEVEL")
        threshold_raw = os.environ.get("SHOPFLOOR_LOW_STOCK_THRESHOLD")

        database_path = database_path_from_url(url) if url else DATABASE_PATH

        log_level = LOG_LEVEL
        if level_name:
            resolved = logging.getLevelName(level_name.strip().upper())
            if not isinstance(resolved, int):
                raise ConfigError(f"Unknown log level in SHOPFLOOR_LOG_LEVEL: {level_name}")
            log_level = resolved

        low_stock_threshold = LOW_STOCK_THRESHOLD
        if threshold_raw:
            try:
                low_stock_threshold = int(threshold_raw)
            except ValueError:
                raise ConfigError(f"SHOPFLOOR_LOW_STOCK_THRESHOLD must be an integer, got '{threshold_raw}'")

        config_instance = cls(
            database_path=database_path,
            log_level=log_level,
            low_stock_threshold=low_stock_threshold,
        )
        logger.info(
            f"AppConfig loaded: database='{config_instance.database_path}', "
            f"log level={logging.getLevelName(config_instance.log_level)}, "
            f"low stock threshold={config_instance.low_stock_threshold}"
        )
        return config_instance

    def logging_config(self, log_file_path: Optional[str] = None) -> Dict[str, Any]:
        return build_logging_config(self.log_level, log_file_path or LOG_FILE_PATH)
