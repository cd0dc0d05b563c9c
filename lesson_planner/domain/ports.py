"""
Port interfaces (ABCs) for the lesson planner.

Ports define the contracts that application services require from the
outside world. Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar, Union
from uuid import UUID

from lesson_planner.domain.entities import LessonPlan
from lesson_planner.domain.messages import Event, Message

T = TypeVar("T")

Handler = Callable[[Any], Union[Any, Awaitable[Any]]]


class MessageBus(ABC):
    """Port for dispatching commands, queries and events to handlers."""

    @abstractmethod
    def register(self, message_cls: type, handler: Handler) -> None:
        """Register the single handler for a command or query type."""
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, event_cls: type, handler: Handler) -> None:
        """Add a subscriber for an event type."""
        raise NotImplementedError

    @abstractmethod
    def send(self, message: Message) -> Any:
        """Route a command or query to its handler and return the result.

        Handler failures propagate to the caller.
        """
        raise NotImplementedError

    @abstractmethod
    async def send_async(self, message: Message) -> Any:
        """Async counterpart of :meth:`send`."""
        raise NotImplementedError

    @abstractmethod
    def publish(self, event: Event) -> None:
        """Deliver an event to every subscriber of its type."""
        raise NotImplementedError

    @abstractmethod
    async def publish_async(self, event: Event) -> None:
        """Async counterpart of :meth:`publish`."""
        raise NotImplementedError


class UnitOfWork(ABC):
    """Port wrapping one database connection with explicit transactions.

    Lifecycle: idle -> active -> committed | rolled_back. ``close`` must
    roll back an open transaction and release the connection exactly once.
    """

    @property
    @abstractmethod
    def connection(self) -> Any:
        """The live connection owned by this unit of work."""
        raise NotImplementedError

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """True while a transaction is open."""
        raise NotImplementedError

    @abstractmethod
    def begin_tran(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None and self.is_active:
                self.rollback()
        finally:
            self.close()


UnitOfWorkFactory = Callable[[], UnitOfWork]


class ObjectMapper(ABC):
    """Port for translating between persistence and transport shapes."""

    @abstractmethod
    def map(self, source: Any, destination: Type[T]) -> T:
        """Build an instance of ``destination`` from ``source``."""
        raise NotImplementedError


class LessonPlanRepository(ABC):
    """Port for persisting and retrieving lesson plans.

    Repositories run on the connection of the unit of work they were
    created for. They never commit.
    """

    @abstractmethod
    def add(self, lesson_plan: LessonPlan) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, lesson_plan_id: UUID) -> Optional[LessonPlan]:
        """Return a lesson plan by its ID, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def find_all(
        self, subject: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[LessonPlan]:
        """Return lesson plans, newest first, optionally filtered by subject."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, lesson_plan_id: UUID) -> bool:
        """Delete a lesson plan. Returns False if it did not exist."""
        raise NotImplementedError
