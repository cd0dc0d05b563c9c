"""
Tests for current-user resolution and the base application service.
"""

import asyncio
from unittest.mock import MagicMock
from uuid import UUID

import pytest
from starlette.datastructures import Headers
from starlette.requests import Request

from lesson_planner.application.common.base_app_service import (
    ANONYMOUS_AUDIT_NAME,
    BaseAppService,
)
from lesson_planner.application.common.user_context import resolve_user_context
from lesson_planner.application.lesson_plans.dtos import GetLessonPlanQuery
from lesson_planner.domain.entities import UserContext
from lesson_planner.domain.errors import InvalidUserIdError

USER_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"


def _request(headers: dict[str, str] | None = None, message: dict | None = None) -> Request:
    raw = [
        (key.lower().encode("latin-1"), value.encode("latin-1"))
        for key, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": raw,
    }
    if message is None:
        return Request(scope)
    return Request(scope, receive=_receive(message))


def _receive(message: dict):
    async def receive() -> dict:
        return message

    return receive


class TestResolveUserContext:
    def test_valid_header(self) -> None:
        context = resolve_user_context(Headers({"UserId": USER_ID}))
        assert context == UserContext(id=UUID(USER_ID))

    def test_header_lookup_is_case_insensitive(self) -> None:
        context = resolve_user_context(Headers({"userid": USER_ID}))
        assert context.id == UUID(USER_ID)

    def test_missing_header(self) -> None:
        assert resolve_user_context(Headers({})) is None

    def test_no_request(self) -> None:
        assert resolve_user_context(None) is None

    @pytest.mark.parametrize("raw", ["not-a-uuid", "", "1234", USER_ID + "x"])
    def test_malformed_header_raises(self, raw: str) -> None:
        with pytest.raises(InvalidUserIdError) as exc_info:
            resolve_user_context({"UserId": raw})
        assert exc_info.value.raw_value == raw

    def test_user_context_is_immutable(self) -> None:
        context = UserContext(id=UUID(USER_ID))
        with pytest.raises(AttributeError):
            context.id = UUID(int=0)


class TestBaseAppService:
    def test_current_user_from_header(self) -> None:
        service = BaseAppService(_request({"UserId": USER_ID}), MagicMock(), MagicMock())
        assert service.current_user.id == UUID(USER_ID)

    def test_no_header_means_no_user(self) -> None:
        service = BaseAppService(_request(), MagicMock(), MagicMock())
        assert service.current_user is None

    def test_no_request_means_no_user(self) -> None:
        service = BaseAppService(None, MagicMock(), MagicMock())
        assert service.current_user is None

    def test_malformed_header_fails_construction(self) -> None:
        with pytest.raises(InvalidUserIdError):
            BaseAppService(_request({"UserId": "nope"}), MagicMock(), MagicMock())

    def test_collaborators_exposed(self) -> None:
        bus, mapper = MagicMock(), MagicMock()
        service = BaseAppService(None, bus, mapper)
        assert service.message_bus is bus
        assert service.mapper is mapper

    def test_audit_stamps_current_user(self) -> None:
        service = BaseAppService(_request({"UserId": USER_ID}), MagicMock(), MagicMock())
        query = service.audit(GetLessonPlanQuery(lesson_plan_id=UUID(int=1)))
        assert query.audit_user_name == USER_ID

    def test_audit_without_user(self) -> None:
        service = BaseAppService(None, MagicMock(), MagicMock())
        query = service.audit(GetLessonPlanQuery(lesson_plan_id=UUID(int=1)))
        assert query.audit_user_name == ANONYMOUS_AUDIT_NAME


class TestClientDisconnected:
    def test_no_request_is_never_disconnected(self) -> None:
        service = BaseAppService(None, MagicMock(), MagicMock())
        assert asyncio.run(service.client_disconnected()) is False

    def test_disconnected_client(self) -> None:
        request = _request(message={"type": "http.disconnect"})
        service = BaseAppService(request, MagicMock(), MagicMock())
        assert asyncio.run(service.client_disconnected()) is True

    def test_connected_client(self) -> None:
        request = _request(message={"type": "http.request", "body": b"", "more_body": False})
        service = BaseAppService(request, MagicMock(), MagicMock())
        assert asyncio.run(service.client_disconnected()) is False
