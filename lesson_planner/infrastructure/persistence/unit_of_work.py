"""
Adapter: SQLAlchemy unit of work.

Implements the UnitOfWork port over a single SQLAlchemy Connection.
Transaction boundaries are explicit: writes made after ``begin_tran`` are
kept only if ``commit`` is called, and closing rolls back a transaction
that is still open.

Statements issued outside ``begin_tran`` behave as if in autocommit mode.
SQLAlchemy opens an implicit transaction for them; ``begin_tran`` commits
it before opening the explicit one, and ``close`` commits it before
releasing the connection. A rollback therefore only ever discards the
writes made since the matching ``begin_tran``.
"""

import logging
from enum import Enum
from typing import Optional

from sqlalchemy.engine import Connection, Engine, RootTransaction

from lesson_planner.domain.errors import UnitOfWorkStateError
from lesson_planner.domain.ports import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)


class TransactionState(Enum):
    """Lifecycle of the transaction held by a unit of work."""

    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    CLOSED = "closed"


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of work owning exactly one connection checked out of an Engine.

    One instance serves one application-service call. It is not
    thread-safe and must never be shared between requests.

    Usage::

        with SqlAlchemyUnitOfWork(engine) as uow:
            uow.begin_tran()
            repo = SqlAlchemyLessonPlanRepository(uow.connection)
            repo.add(plan)
            uow.commit()
    """

    def __init__(self, engine: Engine) -> None:
        self._connection: Optional[Connection] = engine.connect()
        self._transaction: Optional[RootTransaction] = None
        self._state = TransactionState.IDLE

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is TransactionState.ACTIVE

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise UnitOfWorkStateError("use the connection", self._state.value)
        return self._connection

    def begin_tran(self) -> None:
        """Open a transaction.

        Raises:
            UnitOfWorkStateError: If a transaction is already open or the
                unit of work is closed.
        """
        if self._state in (TransactionState.ACTIVE, TransactionState.CLOSED):
            raise UnitOfWorkStateError("begin a transaction", self._state.value)

        connection = self.connection
        self._commit_implicit(connection)
        self._transaction = connection.begin()
        self._state = TransactionState.ACTIVE

    def commit(self) -> None:
        """Commit every write made since ``begin_tran``.

        Raises:
            UnitOfWorkStateError: If no transaction is active.
        """
        if not self.is_active:
            raise UnitOfWorkStateError("commit", self._state.value)
        self._transaction.commit()
        self._transaction = None
        self._state = TransactionState.COMMITTED

    def rollback(self) -> None:
        """Discard every write made since ``begin_tran``.

        Raises:
            UnitOfWorkStateError: If no transaction is active.
        """
        if not self.is_active:
            raise UnitOfWorkStateError("roll back", self._state.value)
        try:
            self._transaction.rollback()
        finally:
            self._transaction = None
            self._state = TransactionState.ROLLED_BACK

    def close(self) -> None:
        """Release the connection.

        An open transaction is rolled back first; work done outside
        ``begin_tran`` is committed.

        Safe to call more than once; only the first call has an effect.
        """
        if self._state is TransactionState.CLOSED:
            return

        try:
            if self.is_active:
                logger.warning(
                    "Unit of work closed with an open transaction; rolling back."
                )
                self.rollback()
            elif self._connection is not None:
                self._commit_implicit(self._connection)
        finally:
            connection, self._connection = self._connection, None
            self._state = TransactionState.CLOSED
            if connection is not None:
                connection.close()

    @staticmethod
    def _commit_implicit(connection: Connection) -> None:
        # Autobegun by statements issued outside begin_tran.
        if connection.in_transaction():
            connection.commit()


def sqlalchemy_unit_of_work_factory(engine: Engine) -> UnitOfWorkFactory:
    """Return a factory producing a fresh unit of work per call."""

    def _create() -> UnitOfWork:
        return SqlAlchemyUnitOfWork(engine)

    return _create
