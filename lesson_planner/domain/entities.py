"""
Domain entities for the lesson planner.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol, TypeVar, runtime_checkable
from uuid import UUID, uuid4

TId = TypeVar("TId")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@runtime_checkable
class EntityWithPrimaryKey(Protocol[TId]):
    """Any persisted entity: exposes a mutable primary key ``id``.

    Ownership and cascading rules are left to the storage layer.
    """

    id: TId


@dataclass(frozen=True)
class UserContext:
    """Identity of the caller for a single request.

    Built from the ``UserId`` request header and never shared across
    requests.
    """

    id: UUID


@dataclass
class LessonPlan:
    """A lesson plan authored by a teacher.

    Attributes:
        title: Short title shown in listings.
        subject: Subject area (e.g. "Mathematics").
        description: Free-form body of the plan.
        created_by: Id of the user who created it, if known.
        id: Primary key.
        created_at: UTC creation timestamp.
    """

    title: str
    subject: str
    description: str = ""
    created_by: Optional[UUID] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utcnow)
