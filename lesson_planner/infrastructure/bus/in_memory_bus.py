"""In-process message bus.

Routes each command or query to the single handler registered for its
``message_type`` and fans events out to every subscriber. Handlers run
in the caller's request scope; their failures propagate unchanged.

Registration happens once at start-up; dispatch never mutates the
routing tables, so one bus instance is shared by all requests.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any

from starlette.concurrency import run_in_threadpool

from lesson_planner.domain.errors import (
    HandlerAlreadyRegisteredError,
    HandlerNotFoundError,
    InvalidMessageError,
)
from lesson_planner.domain.messages import Event, Message
from lesson_planner.domain.ports import Handler, MessageBus

logger = logging.getLogger(__name__)


def _validate(message: Message) -> None:
    if getattr(message, "message_id", None) is None:
        raise InvalidMessageError("missing message_id")
    if not getattr(message, "message_type", ""):
        raise InvalidMessageError("missing message_type")


class InMemoryMessageBus(MessageBus):
    """Message bus dispatching to handlers in the same process."""

    def __init__(self) -> None:
        # message_type -> handler
        self._handlers: dict[str, Handler] = {}
        # message_type -> subscribers, in subscription order
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)
        self._messages_dispatched = 0

    def register(self, message_cls: type, handler: Handler) -> None:
        message_type = message_cls.__name__
        if message_type in self._handlers:
            raise HandlerAlreadyRegisteredError(message_type)
        self._handlers[message_type] = handler
        logger.debug("Registered handler for %s.", message_type)

    def subscribe(self, event_cls: type, handler: Handler) -> None:
        self._subscribers[event_cls.__name__].append(handler)
        logger.debug("Subscribed handler to %s.", event_cls.__name__)

    def is_registered(self, message_cls: type) -> bool:
        return message_cls.__name__ in self._handlers

    @property
    def messages_dispatched(self) -> int:
        """Total commands, queries and events handed to handlers."""
        return self._messages_dispatched

    def _resolve(self, message: Message) -> Handler:
        _validate(message)
        handler = self._handlers.get(message.message_type)
        if handler is None:
            raise HandlerNotFoundError(message.message_type)
        return handler

    def send(self, message: Message) -> Any:
        """Dispatch a command or query synchronously.

        Raises:
            InvalidMessageError: If the message has no id or type.
            HandlerNotFoundError: If no handler is registered for it.
            TypeError: If the registered handler is a coroutine function.
        """
        handler = self._resolve(message)
        if inspect.iscoroutinefunction(handler):
            raise TypeError(
                f"Handler for {message.message_type} is async; use send_async()"
            )
        logger.debug(
            "Dispatching %s id=%s", message.message_type, message.message_id
        )
        result = handler(message)
        self._messages_dispatched += 1
        return result

    async def send_async(self, message: Message) -> Any:
        """Dispatch a command or query from async code.

        Coroutine handlers are awaited; plain handlers run in the
        thread pool so they never block the event loop.
        """
        handler = self._resolve(message)
        logger.debug(
            "Dispatching %s id=%s", message.message_type, message.message_id
        )
        if inspect.iscoroutinefunction(handler):
            result = await handler(message)
        else:
            result = await run_in_threadpool(handler, message)
        self._messages_dispatched += 1
        return result

    def publish(self, event: Event) -> None:
        """Deliver an event to every subscriber, in subscription order.

        An event nobody subscribed to is dropped. The first subscriber
        failure stops delivery and propagates.
        """
        _validate(event)
        subscribers = self._subscribers.get(event.message_type, [])
        if not subscribers:
            logger.debug("No subscribers for %s.", event.message_type)
            return
        for handler in subscribers:
            if inspect.iscoroutinefunction(handler):
                raise TypeError(
                    f"Subscriber for {event.message_type} is async; "
                    "use publish_async()"
                )
            handler(event)
            self._messages_dispatched += 1

    async def publish_async(self, event: Event) -> None:
        """Async counterpart of :meth:`publish`."""
        _validate(event)
        for handler in self._subscribers.get(event.message_type, []):
            if inspect.iscoroutinefunction(handler):
                await handler(event)
            else:
                await run_in_threadpool(handler, event)
            self._messages_dispatched += 1
