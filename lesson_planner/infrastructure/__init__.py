"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: SQLAlchemy persistence and unit of work,
Alembic migrations, the in-memory message bus and the object mapper.
"""
