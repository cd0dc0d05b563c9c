"""Lesson plan use cases: commands, queries and their handlers."""
