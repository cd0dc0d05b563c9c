"""
Uniform response envelope.

Every JSON response leaves the API as:

    {"version": "1.0", "statusCode": 200, "message": "...",
     "result": <payload or null>, "responseException": <error or null>}
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

API_VERSION = "1.0"

SUCCESS_MESSAGE = "Request successful."
FAILURE_MESSAGE = "Request responded with exceptions."
UNHANDLED_MESSAGE = "Unhandled exception."


class ApiResponse(BaseModel):
    """Envelope wrapped around every JSON response body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str = API_VERSION
    status_code: int
    message: str
    result: Any = None
    response_exception: Any = None


def build_envelope(
    status_code: int, payload: Any, version: str = API_VERSION
) -> dict[str, Any]:
    """Wrap a response payload according to its status code.

    Payloads of successful responses (< 400) become ``result``;
    anything else becomes ``responseException``.
    """
    if status_code < 400:
        envelope = ApiResponse(
            version=version,
            status_code=status_code,
            message=SUCCESS_MESSAGE,
            result=payload,
        )
    else:
        envelope = ApiResponse(
            version=version,
            status_code=status_code,
            message=UNHANDLED_MESSAGE if status_code >= 500 and payload is None else FAILURE_MESSAGE,
            response_exception=payload,
        )
    return envelope.model_dump(by_alias=True, mode="json")
