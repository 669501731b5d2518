# jongque/core/storage.py
"""Translate SQLAlchemy failures into the domain error taxonomy"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jongque.core.exceptions import ConflictError, StorageFailureError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(db: Session, action: str):
    """
    Wrap a unit of work so constraint violations surface as ConflictError and
    any other database error as StorageFailureError. The session is rolled
    back in both cases.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Constraint violation while trying to {action}: {e.orig}")
        raise ConflictError(f"Could not {action}: the resource was claimed concurrently") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage failure while trying to {action}: {e}", exc_info=True)
        raise StorageFailureError(f"Could not {action} due to a storage failure") from e
