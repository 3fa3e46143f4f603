from unittest import mock

from shopfloor import main_app
from shopfloor.errors import ConfigError


@mock.patch('shopfloor.main_app.QMessageBox')
@mock.patch('shopfloor.main_app.QApplication')
def test_config_error_is_logged_and_reported(mock_app, mock_message_box):
    """Console logging is in place before the configuration is read."""
    calls = mock.Mock()
    calls.load.side_effect = ConfigError("SHOPFLOOR_LOW_STOCK_THRESHOLD must be an integer, got 'x'")
    with mock.patch('shopfloor.main_app.logging.basicConfig', calls.basic_config), \
            mock.patch('shopfloor.main_app.AppConfig.load', calls.load):
        assert main_app.main() == 1

    assert [c[0] for c in calls.mock_calls] == ["basic_config", "load"]
    mock_message_box.critical.assert_called_once()
