"""
GrowthMindz Admin - Database Error Classification
Maps driver-specific failures onto the handful of error classes the
compatibility layer reacts to.
"""
from typing import Optional

from sqlalchemy.exc import DBAPIError


UNDEFINED_COLUMN = 'undefined_column'
UNDEFINED_TABLE = 'undefined_table'
UNIQUE_VIOLATION = 'unique_violation'

SCHEMA_ERRORS = frozenset({UNDEFINED_COLUMN, UNDEFINED_TABLE})

# PostgreSQL SQLSTATE codes
_SQLSTATE_CLASSES = {
    '42703': UNDEFINED_COLUMN,
    '42P01': UNDEFINED_TABLE,
    '23505': UNIQUE_VIOLATION,
}

# SQLite reports everything through the message text
_MESSAGE_CLASSES = (
    ('no such column', UNDEFINED_COLUMN),
    ('has no column named', UNDEFINED_COLUMN),
    ('no such table', UNDEFINED_TABLE),
    ('unique constraint failed', UNIQUE_VIOLATION),
)


def classify_db_error(error: BaseException) -> Optional[str]:
    """Return the error class of a database failure, or None if unclassified."""
    orig = getattr(error, 'orig', None) if isinstance(error, DBAPIError) else error
    if orig is None:
        return None

    sqlstate = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
    if sqlstate:
        return _SQLSTATE_CLASSES.get(sqlstate)

    message = str(orig).lower()
    for needle, error_class in _MESSAGE_CLASSES:
        if needle in message:
            return error_class
    return None


def is_unique_violation(error: BaseException) -> bool:
    return classify_db_error(error) == UNIQUE_VIOLATION
