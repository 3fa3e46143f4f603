# shopfloor/main_app.py
import os
import sys
import logging
import logging.config

from PyQt5.QtWidgets import QApplication, QMessageBox

from shopfloor.bootstrap import build_services
from shopfloor.config import LOG_FORMAT, LOG_LEVEL, LOGS_DIR, AppConfig, ensure_directories
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.errors import ApiError
from shopfloor.presentation.controller import Controller
from shopfloor.presentation.main_window import MainWindow
from shopfloor.presentation.qt_runner import QtCommandRunner

logger = logging.getLogger(__name__)


def main() -> int:
    app = QApplication(sys.argv)
    # Console logging until the configured handlers are installed.
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    try:
        config = AppConfig.load()
        ensure_directories(os.path.dirname(os.path.abspath(config.database_path)), LOGS_DIR)
        logging.config.dictConfig(config.logging_config())

        logger.info("Initializing Database Manager and creating tables...")
        db_manager = DatabaseManager(config.database_path)
        db_manager.create_tables()
    except ApiError as e:
        logger.error(f"FATAL: Could not start: {e}", exc_info=True)
        QMessageBox.critical(None, "Startup error", f"Could not start: {e}")
        return 1

    services = build_services(db_manager, low_stock_threshold=config.low_stock_threshold)
    controller = Controller(services, clipboard=app.clipboard().setText)
    runner = QtCommandRunner(controller)

    window = MainWindow(runner)
    window.show()
    runner.start()
    logger.info("Application started.")
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
