"""Core package: settings and the dependency graph built at start-up."""
