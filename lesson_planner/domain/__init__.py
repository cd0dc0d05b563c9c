"""
Domain layer package.

Contains entities, message contracts, port interfaces and errors.
This layer has ZERO framework dependencies.
No HTTP, no database drivers, no side effects.
"""
