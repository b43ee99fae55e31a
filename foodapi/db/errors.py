"""
Classify driver-level database errors into AppExceptions.

PostgreSQL drivers expose a SQLSTATE, MySQL-style drivers an errno as the
first exception argument, and SQLite only a message.
"""
import logging

from sqlalchemy.exc import DBAPIError

from foodapi.errors import ErrorType
from foodapi.exceptions import AppException

logger = logging.getLogger(__name__)

FOREIGN_KEY_CODES = {"23503", 1451, 1452}
UNIQUE_CODES = {"23505", 1062}
SCHEMA_CODES = {
    "42703", 1054,           # unknown column
    "22001", 1406,           # value too long
    "22P02", "42804", 1366,  # type mismatch
}

FOREIGN_KEY_MESSAGES = ("foreign key constraint failed",)
UNIQUE_MESSAGES = ("unique constraint failed",)
SCHEMA_MESSAGES = ("no such column", "has no column named", "datatype mismatch")


def get_error_code(exc: DBAPIError) -> str | int | None:
    """Extract the vendor error code from a wrapped driver exception."""
    orig = exc.orig
    if orig is None:
        return None

    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return code

    # The asyncpg adapter keeps the driver exception on __cause__
    cause = getattr(orig, "__cause__", None)
    if cause is not None and getattr(cause, "sqlstate", None):
        return cause.sqlstate

    if orig.args and isinstance(orig.args[0], int):
        return orig.args[0]
    return None


def classify_db_error(
    exc: DBAPIError,
    integrity_message: str = "Referenced record does not exist",
    conflict_message: str = "Record already exists",
) -> AppException | None:
    """Map a driver error to an AppException, or None when unclassified."""
    code = get_error_code(exc)
    message = str(exc.orig if exc.orig is not None else exc).lower()

    if code in FOREIGN_KEY_CODES or any(m in message for m in FOREIGN_KEY_MESSAGES):
        return AppException(ErrorType.REFERENTIAL_INTEGRITY, integrity_message)

    if code in UNIQUE_CODES or any(m in message for m in UNIQUE_MESSAGES):
        return AppException(ErrorType.CONFLICT, conflict_message)

    if code in SCHEMA_CODES or any(m in message for m in SCHEMA_MESSAGES):
        detail = str(exc.orig).strip().splitlines()[0] if exc.orig is not None else str(exc)
        return AppException(ErrorType.SCHEMA, "Invalid field data", detail=detail)

    logger.debug(f"Unclassified database error (code={code}): {exc}")
    return None
