"""SQLAlchemy persistence: engine, tables, unit of work, repositories, migrations."""
