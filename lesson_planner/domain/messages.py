"""
Message envelope shared by every command, query and event.

Messages carry data between application services and handlers
through the message bus. They are plain dataclasses with no behavior
beyond their envelope fields.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(kw_only=True)
class Message:
    """Base envelope for anything dispatched through the message bus.

    Attributes:
        audit_user_name: Name of the acting user. Set by the caller
            before dispatch.

    ``message_id`` and ``message_created_date`` are fixed at creation.
    ``message_type`` is the concrete class name and is what the bus
    routes on.
    """

    audit_user_name: Optional[str] = None
    _message_id: UUID = field(default_factory=uuid4, init=False, repr=False)
    _message_created_date: datetime = field(
        default_factory=_utcnow, init=False, repr=False
    )

    @property
    def message_id(self) -> UUID:
        return self._message_id

    @property
    def message_created_date(self) -> datetime:
        return self._message_created_date

    @property
    def message_type(self) -> str:
        return type(self).__name__


@dataclass(kw_only=True)
class Command(Message):
    """A request to change state. Handled by exactly one handler."""


@dataclass(kw_only=True)
class Query(Message):
    """A request to read state. Handled by exactly one handler."""


@dataclass(kw_only=True)
class Event(Message):
    """Something that happened. Delivered to every subscriber."""
