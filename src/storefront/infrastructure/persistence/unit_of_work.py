"""SQLAlchemy implementation of the unit of work.

Every ``with uow:`` opens a fresh session (and transaction).  Lock
timeouts, deadlocks, serialisation failures and SQLite's "database is
locked" all arrive as ``OperationalError``; they leave the block as
``TransactionConflictError`` so the retry helper can run the operation
again from the top.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from storefront.domain.exceptions import TransactionConflictError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.sqlalchemy_repositories import (
    SqlAlchemyInventoryRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
)

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.orders = SqlAlchemyOrderRepository(self._session)
        self.products = SqlAlchemyProductRepository(self._session)
        self.inventory = SqlAlchemyInventoryRepository(self._session)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            self.rollback()
        finally:
            if self._session is not None:
                self._session.close()
            self._session = None
        if isinstance(exc_val, OperationalError):
            raise TransactionConflictError(str(exc_val.orig)) from exc_val

    def commit(self) -> None:
        try:
            self._session.commit()
        except OperationalError as exc:
            logger.warning("Commit failed: %s", exc.orig)
            raise TransactionConflictError(str(exc.orig)) from exc

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
