# shopfloor/errors.py

import sqlite3
import logging

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error for every failure crossing the persistence boundary."""
    kind = "api"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFoundError(ApiError):
    kind = "not_found"


class ConstraintError(ApiError):
    kind = "constraint"


class UnavailableError(ApiError):
    kind = "unavailable"


class InvalidInputError(ApiError, ValueError):
    kind = "invalid_input"


class ConfigError(ApiError):
    """Raised when the environment holds an unusable setting."""
    kind = "config"


def from_sqlite_error(e: sqlite3.Error) -> ApiError:
    if isinstance(e, sqlite3.IntegrityError):
        return ConstraintError(str(e))
    if isinstance(e, sqlite3.OperationalError):
        return UnavailableError(str(e))
    return ApiError(str(e))
