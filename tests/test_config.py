import logging
import os
from unittest import mock

import pytest

from shopfloor.config import (
    DATABASE_PATH, LOW_STOCK_THRESHOLD, AppConfig, build_logging_config, database_path_from_url,
)
from shopfloor.errors import ConfigError


@pytest.mark.parametrize("url, expected", [
    ("sqlite:///var/data/shop.db", "/var/data/shop.db"),
    ("sqlite://shop.db", "shop.db"),
    ("sqlite:shop.db", "shop.db"),
    ("data/shop.db", "data/shop.db"),
    ("sqlite:///var/data/shop.db?mode=rwc", "/var/data/shop.db"),
])
def test_database_path_from_url(url, expected):
    assert database_path_from_url(url) == expected


@pytest.mark.parametrize("url", ["", "   ", "sqlite://:memory:", ":memory:", "postgres://db/shop", "sqlite://"])
def test_database_path_from_url_rejects(url):
    with pytest.raises(ConfigError):
        database_path_from_url(url)


@mock.patch('shopfloor.config.load_dotenv')
@mock.patch.dict(os.environ, {}, clear=True)
def test_load_defaults(mock_load_dotenv):
    """Nothing set gives the built-in defaults."""
    config = AppConfig.load()
    assert config.database_path == DATABASE_PATH
    assert config.log_level == logging.INFO
    assert config.low_stock_threshold == LOW_STOCK_THRESHOLD
    mock_load_dotenv.assert_called_once()


@mock.patch('shopfloor.config.load_dotenv')
@mock.patch.dict(os.environ, {
    "DATABASE_URL": "sqlite:///tmp/shop.db",
    "SHOPFLOOR_LOG_LEVEL": "debug",
    "SHOPFLOOR_LOW_STOCK_THRESHOLD": "5",
}, clear=True)
def test_load_from_environment(mock_load_dotenv):
    config = AppConfig.load()
    assert config.database_path == "/tmp/shop.db"
    assert config.log_level == logging.DEBUG
    assert config.low_stock_threshold == 5


@mock.patch('shopfloor.config.load_dotenv')
@mock.patch.dict(os.environ, {"SHOPFLOOR_LOW_STOCK_THRESHOLD": "plenty"}, clear=True)
def test_load_rejects_bad_threshold(mock_load_dotenv):
    with pytest.raises(ConfigError) as excinfo:
        AppConfig.load()
    assert "SHOPFLOOR_LOW_STOCK_THRESHOLD" in str(excinfo.value)


@mock.patch('shopfloor.config.load_dotenv')
@mock.patch.dict(os.environ, {"SHOPFLOOR_LOG_LEVEL": "LOUD"}, clear=True)
def test_load_rejects_unknown_log_level(mock_load_dotenv):
    with pytest.raises(ConfigError):
        AppConfig.load()


@mock.patch('shopfloor.config.load_dotenv')
@mock.patch.dict(os.environ, {"DATABASE_URL": "sqlite://:memory:"}, clear=True)
def test_load_rejects_memory_database(mock_load_dotenv):
    with pytest.raises(ConfigError):
        AppConfig.load()


def test_logging_config_uses_level_and_file(tmp_path):
    log_file = str(tmp_path / "app.log")
    config = build_logging_config(logging.WARNING, log_file)
    assert config['root']['level'] == logging.WARNING
    assert config['handlers']['file']['filename'] == log_file
    assert AppConfig(log_level=logging.DEBUG).logging_config(log_file)['handlers']['console']['level'] == logging.DEBUG
