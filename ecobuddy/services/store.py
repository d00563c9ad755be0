"""
Store Access Helpers
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from ecobuddy.errors import TransientStoreError
from ecobuddy.extensions import db

logger = logging.getLogger(__name__)


@contextmanager
def store_operation(description, write=False):
    """Turn driver failures into TransientStoreError, rolling back writes.

    Nothing is retried; the caller gets a single generic failure.
    """
    try:
        yield
    except SQLAlchemyError as e:
        if write:
            db.session.rollback()
        logger.exception('Store error while %s', description)
        raise TransientStoreError() from e


# SQLite INTEGER columns hold signed 64-bit values
MAX_STORED_INT = 2 ** 63 - 1


def fits_integer_column(value):
    """Whether ``value`` can be bound against an INTEGER column without overflowing."""
    return -MAX_STORED_INT - 1 <= value <= MAX_STORED_INT
