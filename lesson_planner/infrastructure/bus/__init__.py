"""Message bus adapters."""

from lesson_planner.infrastructure.bus.in_memory_bus import InMemoryMessageBus

__all__ = ["InMemoryMessageBus"]
