# shopfloor/presentation/command_runner.py

import logging
from collections import deque
from typing import Any, Deque, Iterable, List

from shopfloor.errors import ApiError
from shopfloor.presentation.messages import Command, Completed

logger = logging.getLogger(__name__)


def execute_command(command: Command) -> Completed:
    """Runs one command and wraps its outcome in a completion message."""
    try:
        value = command.run()
    except ApiError as e:
        return Completed(action=command.action, screen=command.screen, slice=command.slice,
                         generation=command.generation, error=e)
    except Exception as e:
        logger.exception(f"Unexpected failure running {command.action.value} for {command.slice}")
        return Completed(action=command.action, screen=command.screen, slice=command.slice,
                         generation=command.generation, error=ApiError(f"Unexpected error: {e}"))
    return Completed(action=command.action, screen=command.screen, slice=command.slice,
                     generation=command.generation, value=value)


class CommandRunner:
    """Runs commands on the calling thread, first in first out.

    With ``hold=True`` commands are queued but not run until ``drain`` or
    ``run_next`` is called, so completions can be delivered in any order.
    """

    def __init__(self, controller, hold: bool = False):
        if controller is None:
            raise ValueError("controller cannot be None")
        self.controller = controller
        self.hold = hold
        self.pending: Deque[Command] = deque()
        self.history: List[Completed] = []

    def start(self) -> None:
        self.submit(self.controller.start())

    def dispatch(self, message: Any) -> None:
        self.submit(self.controller.update(message))

    def submit(self, commands: Iterable[Command]) -> None:
        self.pending.extend(commands)
        if not self.hold:
            self.drain()

    def deliver(self, completed: Completed) -> None:
        self.history.append(completed)
        self.pending.extend(self.controller.update(completed))

    def run_next(self) -> Completed:
        command = self.pending.popleft()
        completed = execute_command(command)
        self.deliver(completed)
        return completed

    def drain(self) -> None:
        while self.pending:
            self.run_next()
