"""
Base class for every application service.

Supplies derived services with the resolved current user, the message
bus and the object mapper, so none of them re-resolve these per call.
Performs no business logic itself.
"""

import logging
from typing import Optional

from starlette.requests import Request

from lesson_planner.application.common.user_context import resolve_user_context
from lesson_planner.domain.entities import UserContext
from lesson_planner.domain.messages import Message
from lesson_planner.domain.ports import MessageBus, ObjectMapper

logger = logging.getLogger(__name__)

ANONYMOUS_AUDIT_NAME = "anonymous"


class BaseAppService:
    """Composition point for request identity, messaging and mapping.

    Args:
        request: The current request, or None when the service is built
            outside of one (scripts, background jobs).
        message_bus: Bus used to dispatch commands, queries and events.
        mapper: Object mapper for persistence/transport translation.

    Raises:
        InvalidUserIdError: If the request carries a malformed
            ``UserId`` header.
    """

    def __init__(
        self,
        request: Optional[Request],
        message_bus: MessageBus,
        mapper: ObjectMapper,
    ) -> None:
        self.request = request
        self.message_bus = message_bus
        self.mapper = mapper
        self.current_user: Optional[UserContext] = resolve_user_context(
            request.headers if request is not None else None
        )

    def audit(self, message: Message) -> Message:
        """Stamp the acting user on a message before it is dispatched."""
        if self.current_user is not None:
            message.audit_user_name = str(self.current_user.id)
        else:
            message.audit_user_name = ANONYMOUS_AUDIT_NAME
        return message

    async def client_disconnected(self) -> bool:
        """True once the client has gone away.

        Long-running operations poll this to abandon work nobody will
        receive.
        """
        if self.request is None:
            return False
        return await self.request.is_disconnected()
