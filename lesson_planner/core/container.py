"""
Dependency graph for the process.

Built exactly once at start-up by ``build_container``. Modules are
registered in a fixed order and each one only reads bindings made by
the modules before it:

    1. infrastructure: engine, unit-of-work factory, message bus
    2. mapping: object mapper
    3. application: message handlers registered on the bus

Request-scoped objects (application services, units of work) are never
stored here; they are created per request from these bindings.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import Engine

from lesson_planner.application.lesson_plans.handlers import LessonPlanHandlers
from lesson_planner.core.config import Settings
from lesson_planner.domain.ports import MessageBus, ObjectMapper, UnitOfWorkFactory
from lesson_planner.infrastructure.bus.in_memory_bus import InMemoryMessageBus
from lesson_planner.infrastructure.mapping import PydanticObjectMapper
from lesson_planner.infrastructure.persistence.database import (
    create_engine_from_settings,
)
from lesson_planner.infrastructure.persistence.lesson_plan_repository import (
    SqlAlchemyLessonPlanRepository,
)
from lesson_planner.infrastructure.persistence.unit_of_work import (
    sqlalchemy_unit_of_work_factory,
)

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Process-wide singletons shared by every request."""

    settings: Settings
    engine: Optional[Engine] = None
    uow_factory: Optional[UnitOfWorkFactory] = None
    message_bus: Optional[MessageBus] = None
    mapper: Optional[ObjectMapper] = None
    registered_modules: list[str] = field(default_factory=list)

    def dispose(self) -> None:
        """Release pooled database connections."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Engine disposed.")


def register_infrastructure(container: Container) -> None:
    """Bind the engine, the unit-of-work factory and the message bus."""
    container.engine = create_engine_from_settings(container.settings)
    container.uow_factory = sqlalchemy_unit_of_work_factory(container.engine)
    container.message_bus = InMemoryMessageBus()
    container.registered_modules.append("infrastructure")


def register_mapping(container: Container) -> None:
    """Bind the object mapper."""
    container.mapper = PydanticObjectMapper()
    container.registered_modules.append("mapping")


def register_application_services(container: Container) -> None:
    """Register every message handler on the bus.

    Requires the infrastructure module.
    """
    if container.uow_factory is None or container.message_bus is None:
        raise RuntimeError(
            "Infrastructure module must be registered before application services."
        )
    LessonPlanHandlers(
        uow_factory=container.uow_factory,
        repository_factory=SqlAlchemyLessonPlanRepository,
    ).register(container.message_bus)
    container.registered_modules.append("application")


MODULES = (register_infrastructure, register_mapping, register_application_services)


def build_container(settings: Settings) -> Container:
    """Construct the dependency graph in registration order."""
    container = Container(settings=settings)
    for register in MODULES:
        register(container)
    logger.info("Registered modules: %s", ", ".join(container.registered_modules))
    return container
