"""
Lesson Planner: web application backend.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with a CQRS-style message bus.

Bounded contexts:
    - lesson_plans: Authoring and browsing lesson plans.

Layers:
    - domain: Entities, messages, ports (ABCs), errors. No framework imports.
    - application: Application services, message handlers, DTOs.
    - infrastructure: Adapters (SQLAlchemy, Alembic, message bus, mapper).
    - interfaces: FastAPI routers, Pydantic schemas, dependency providers.
    - shared: Cross-cutting concerns (errors, middleware, security, logging).
    - core: Settings and the composition root.
"""

__version__ = "0.1.0"
