"""
Tests for the SQLAlchemy unit of work and the lesson plan repository.

Uses a migrated SQLite database per test.
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from lesson_planner.domain.entities import LessonPlan
from lesson_planner.domain.errors import UnitOfWorkStateError
from lesson_planner.infrastructure.persistence.lesson_plan_repository import (
    SqlAlchemyLessonPlanRepository,
)
from lesson_planner.infrastructure.persistence.unit_of_work import (
    SqlAlchemyUnitOfWork,
    TransactionState,
    sqlalchemy_unit_of_work_factory,
)


def _plan(subject: str = "Mathematics", title: str = "Fractions") -> LessonPlan:
    return LessonPlan(title=title, subject=subject, description="Halves and quarters")


def _find(engine, plan_id):
    with SqlAlchemyUnitOfWork(engine) as uow:
        return SqlAlchemyLessonPlanRepository(uow.connection).get_by_id(plan_id)


class TestTransactionLifecycle:
    def test_starts_idle(self, engine) -> None:
        with SqlAlchemyUnitOfWork(engine) as uow:
            assert uow.state is TransactionState.IDLE
            assert not uow.is_active

    def test_commit_without_begin_raises(self, engine) -> None:
        with SqlAlchemyUnitOfWork(engine) as uow:
            with pytest.raises(UnitOfWorkStateError) as exc_info:
                uow.commit()
        assert exc_info.value.state == "idle"

    def test_rollback_without_begin_raises(self, engine) -> None:
        with SqlAlchemyUnitOfWork(engine) as uow:
            with pytest.raises(UnitOfWorkStateError):
                uow.rollback()

    def test_double_begin_raises(self, engine) -> None:
        with SqlAlchemyUnitOfWork(engine) as uow:
            uow.begin_tran()
            with pytest.raises(UnitOfWorkStateError) as exc_info:
                uow.begin_tran()
        assert exc_info.value.state == "active"

    def test_commit_twice_raises(self, engine) -> None:
        with SqlAlchemyUnitOfWork(engine) as uow:
            uow.begin_tran()
            uow.commit()
            assert uow.state is TransactionState.COMMITTED
            with pytest.raises(UnitOfWorkStateError):
                uow.commit()

    def test_begin_again_after_commit(self, engine) -> None:
        with SqlAlchemyUnitOfWork(engine) as uow:
            uow.begin_tran()
            uow.commit()
            uow.begin_tran()
            assert uow.is_active
            uow.rollback()
            assert uow.state is TransactionState.ROLLED_BACK

    def test_use_after_close_raises(self, engine) -> None:
        uow = SqlAlchemyUnitOfWork(engine)
        uow.close()
        assert uow.state is TransactionState.CLOSED
        with pytest.raises(UnitOfWorkStateError):
            uow.begin_tran()
        with pytest.raises(UnitOfWorkStateError):
            uow.connection


class TestDurability:
    def test_commit_persists(self, engine) -> None:
        plan = _plan()
        with SqlAlchemyUnitOfWork(engine) as uow:
            uow.begin_tran()
            SqlAlchemyLessonPlanRepository(uow.connection).add(plan)
            uow.commit()

        stored = _find(engine, plan.id)
        assert stored is not None
        assert stored.title == "Fractions"
        assert stored.created_at.tzinfo is not None

    def test_rollback_discards(self, engine) -> None:
        plan = _plan()
        with SqlAlchemyUnitOfWork(engine) as uow:
            uow.begin_tran()
            SqlAlchemyLessonPlanRepository(uow.connection).add(plan)
            uow.rollback()

        assert _find(engine, plan.id) is None

    def test_close_with_open_transaction_rolls_back(self, engine) -> None:
        plan = _plan()
        uow = SqlAlchemyUnitOfWork(engine)
        uow.begin_tran()
        SqlAlchemyLessonPlanRepository(uow.connection).add(plan)
        uow.close()

        assert uow.state is TransactionState.CLOSED
        assert _find(engine, plan.id) is None

    def test_exception_in_block_rolls_back(self, engine) -> None:
        plan = _plan()
        with pytest.raises(RuntimeError):
            with SqlAlchemyUnitOfWork(engine) as uow:
                uow.begin_tran()
                SqlAlchemyLessonPlanRepository(uow.connection).add(plan)
                raise RuntimeError("handler failed")

        assert uow.state is TransactionState.CLOSED
        assert _find(engine, plan.id) is None

    def test_writes_before_begin_survive_rollback(self, engine) -> None:
        early, late = _plan(title="Early"), _plan(title="Late")
        with SqlAlchemyUnitOfWork(engine) as uow:
            repo = SqlAlchemyLessonPlanRepository(uow.connection)
            repo.add(early)
            uow.begin_tran()
            repo.add(late)
            uow.rollback()

        assert _find(engine, early.id) is not None
        assert _find(engine, late.id) is None

    def test_writes_without_transaction_kept_on_close(self, engine) -> None:
        plan = _plan()
        with SqlAlchemyUnitOfWork(engine) as uow:
            SqlAlchemyLessonPlanRepository(uow.connection).add(plan)

        assert _find(engine, plan.id) is not None


class TestConnectionRelease:
    def test_connection_released_exactly_once(self) -> None:
        engine = MagicMock()
        uow = SqlAlchemyUnitOfWork(engine)
        uow.close()
        uow.close()
        engine.connect.return_value.close.assert_called_once()

    def test_open_transaction_rolled_back_on_close(self) -> None:
        engine = MagicMock()
        connection = engine.connect.return_value
        connection.in_transaction.return_value = False

        uow = SqlAlchemyUnitOfWork(engine)
        uow.begin_tran()
        uow.close()

        connection.begin.return_value.rollback.assert_called_once()
        connection.close.assert_called_once()

    def test_connection_released_when_rollback_fails(self) -> None:
        engine = MagicMock()
        connection = engine.connect.return_value
        connection.in_transaction.return_value = False
        connection.begin.return_value.rollback.side_effect = RuntimeError("connection lost")

        uow = SqlAlchemyUnitOfWork(engine)
        with pytest.raises(RuntimeError, match="connection lost"):
            with uow:
                uow.begin_tran()
                raise ValueError("handler failed")

        connection.close.assert_called_once()
        assert uow.state is TransactionState.CLOSED

    def test_implicit_transaction_committed_before_begin(self) -> None:
        engine = MagicMock()
        connection = engine.connect.return_value
        connection.in_transaction.return_value = True

        uow = SqlAlchemyUnitOfWork(engine)
        uow.begin_tran()

        connection.commit.assert_called_once()
        connection.begin.assert_called_once()
        connection.get_transaction.assert_not_called()

    def test_factory_creates_fresh_instances(self) -> None:
        engine = MagicMock()
        factory = sqlalchemy_unit_of_work_factory(engine)
        assert factory() is not factory()
        assert engine.connect.call_count == 2


class TestLessonPlanRepository:
    def test_find_all_filters_and_pages(self, engine) -> None:
        plans = [_plan("Mathematics", f"Maths {i}") for i in range(3)]
        plans.append(_plan("History", "Romans"))
        with SqlAlchemyUnitOfWork(engine) as uow:
            uow.begin_tran()
            repo = SqlAlchemyLessonPlanRepository(uow.connection)
            for plan in plans:
                repo.add(plan)
            uow.commit()

            assert len(repo.find_all()) == 4
            assert [p.title for p in repo.find_all(subject="History")] == ["Romans"]
            assert len(repo.find_all(subject="Mathematics", limit=2)) == 2
            assert len(repo.find_all(subject="Mathematics", limit=2, offset=2)) == 1

    def test_delete(self, engine) -> None:
        plan = _plan()
        with SqlAlchemyUnitOfWork(engine) as uow:
            uow.begin_tran()
            repo = SqlAlchemyLessonPlanRepository(uow.connection)
            repo.add(plan)
            assert repo.delete(plan.id) is True
            assert repo.delete(uuid4()) is False
            uow.commit()

        assert _find(engine, plan.id) is None
