# shopfloor/presentation/qt_runner.py

import logging
from typing import Any, Iterable

from PyQt5.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

from shopfloor.presentation.command_runner import execute_command
from shopfloor.presentation.messages import Command, Completed

logger = logging.getLogger(__name__)


class _CompletionRelay(QObject):
    # Lives on the GUI thread; emitting from a worker queues the slot call there.
    completed = pyqtSignal(object)


class _CommandTask(QRunnable):
    def __init__(self, command: Command, relay: _CompletionRelay):
        super().__init__()
        self.command = command
        self.relay = relay

    def run(self):
        self.relay.completed.emit(execute_command(self.command))


class QtCommandRunner(QObject):
    """Runs commands on a thread pool and feeds completions back to the controller on the GUI thread."""
    state_changed = pyqtSignal()

    def __init__(self, controller, pool: QThreadPool = None, parent=None):
        super().__init__(parent)
        if controller is None:
            raise ValueError("controller cannot be None")
        self.controller = controller
        self.pool = pool or QThreadPool.globalInstance()
        self._relay = _CompletionRelay()
        self._relay.completed.connect(self._on_completed)

    def start(self) -> None:
        self.submit(self.controller.start())
        self.state_changed.emit()

    def dispatch(self, message: Any) -> None:
        self.submit(self.controller.update(message))
        self.state_changed.emit()

    def submit(self, commands: Iterable[Command]) -> None:
        for command in commands:
            logger.debug(f"Scheduling {command.action.value} for {command.slice} (generation {command.generation}).")
            self.pool.start(_CommandTask(command, self._relay))

    def _on_completed(self, completed: Completed) -> None:
        self.submit(self.controller.update(completed))
        self.state_changed.emit()
