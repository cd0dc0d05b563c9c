"""
Domain-specific errors for the lesson planner.

All errors raised from the domain, application and infrastructure
layers derive from LessonPlannerError.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class LessonPlannerError(Exception):
    """Base error for all lesson planner errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidUserIdError(LessonPlannerError):
    """Raised when the UserId request header is not a valid UUID."""

    def __init__(self, raw_value: str) -> None:
        super().__init__(f"UserId header is not a valid UUID: {raw_value!r}")
        self.raw_value = raw_value


class UserRequiredError(LessonPlannerError):
    """Raised when an operation needs a current user and none was supplied."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"A current user is required to {operation}")
        self.operation = operation


class UnitOfWorkStateError(LessonPlannerError):
    """Raised when a unit of work is used out of order.

    Double begin, commit or rollback without an active transaction,
    or any use after the unit of work was closed.
    """

    def __init__(self, operation: str, state: str) -> None:
        super().__init__(f"Cannot {operation} while unit of work is {state}")
        self.operation = operation
        self.state = state


class InvalidMessageError(LessonPlannerError):
    """Raised when a message lacks an identifier or a type tag."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid message: {reason}")
        self.reason = reason


class HandlerNotFoundError(LessonPlannerError):
    """Raised when no handler is registered for a dispatched message type."""

    def __init__(self, message_type: str) -> None:
        super().__init__(f"No handler registered for message type: {message_type}")
        self.message_type = message_type


class HandlerAlreadyRegisteredError(LessonPlannerError):
    """Raised when a second handler is registered for a command or query."""

    def __init__(self, message_type: str) -> None:
        super().__init__(f"A handler is already registered for: {message_type}")
        self.message_type = message_type


class LessonPlanNotFoundError(LessonPlannerError):
    """Raised when a lesson plan cannot be found."""

    def __init__(self, lesson_plan_id: str) -> None:
        super().__init__(f"Lesson plan not found: {lesson_plan_id}")
        self.lesson_plan_id = lesson_plan_id


class MigrationError(LessonPlannerError):
    """Raised when the database schema cannot be upgraded at start-up."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Database migration failed: {reason}")
        self.reason = reason
