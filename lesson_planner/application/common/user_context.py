"""
Current-user resolution.

Reads the caller identity from the ``UserId`` request header.
A missing header means "no current user", which is a valid state.
A malformed header is a client error and fails fast.
"""

from typing import Mapping, Optional
from uuid import UUID

from lesson_planner.domain.entities import UserContext
from lesson_planner.domain.errors import InvalidUserIdError

USER_ID_HEADER = "UserId"


def resolve_user_context(
    headers: Optional[Mapping[str, str]],
) -> Optional[UserContext]:
    """Build the UserContext for a request from its headers.

    Args:
        headers: Request headers, or None outside of a request. Lookup
            relies on the mapping for case-insensitivity, as Starlette's
            ``Headers`` provides.

    Returns:
        The UserContext, or None if the header is absent.

    Raises:
        InvalidUserIdError: If the header is present but not a UUID.
    """
    if headers is None:
        return None

    raw_value = headers.get(USER_ID_HEADER)
    if raw_value is None:
        return None

    try:
        user_id = UUID(raw_value.strip())
    except (ValueError, AttributeError, TypeError) as exc:
        raise InvalidUserIdError(str(raw_value)) from exc
    return UserContext(id=user_id)
