"""
Unit of work over the Flask-SQLAlchemy session.

Collaborators only add and flush; the unit of work commits once when the
block exits cleanly and rolls back once when anything raises.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from app import db
from app.buisness.core.errors import LedgerConflictError
from app.logger import get_logger

logger = get_logger("stock_ledger.domain.core.unit_of_work")


class UnitOfWork:
    """
    Usage:
        with UnitOfWork() as uow:
            uow.add(obj)
            uow.flush()

    IntegrityError and StaleDataError raised inside the block (or by the final
    commit) are rolled back and re-raised as LedgerConflictError.
    """

    def __init__(self, session=None):
        self.session = session if session is not None else db.session
        self._finished = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._finished:
            return False

        if exc_type is not None:
            self.rollback()
            if isinstance(exc, (IntegrityError, StaleDataError)):
                logger.warning(f"Concurrent ledger change detected: {exc.__class__.__name__}")
                raise LedgerConflictError() from exc
            return False

        try:
            self.commit()
        except (IntegrityError, StaleDataError) as e:
            self.rollback()
            logger.warning(f"Commit rejected by the database: {e.__class__.__name__}")
            raise LedgerConflictError() from e
        except Exception:
            self.rollback()
            raise
        return False

    def add(self, instance):
        self.session.add(instance)
        return instance

    def flush(self):
        self.session.flush()

    def commit(self):
        self.session.commit()
        self._finished = True

    def rollback(self):
        self.session.rollback()
        self._finished = True
