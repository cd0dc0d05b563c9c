"""
Tests for the server middleware chain.

Builds a small app with the production middleware order around
routes that succeed, fail with a handled domain error, or raise.
"""

import logging

import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from lesson_planner.domain.errors import LessonPlanNotFoundError
from lesson_planner.shared.errors.handlers import register_error_handlers
from lesson_planner.shared.middleware.envelope import build_envelope
from lesson_planner.shared.middleware.response_wrapper import (
    ApiResponseWrapperMiddleware,
)
from lesson_planner.shared.middleware.server_middleware import (
    RequestLoggingMiddleware,
)
from lesson_planner.shared.security.headers import (
    SecurityHeadersMiddleware,
    security_headers,
)

LOGGER_NAME = "tests.http"


class RecordingLoggingMiddleware(RequestLoggingMiddleware):
    """Keeps every log_exception call for inspection."""

    calls: list = []

    def log_exception(self, request, elapsed_ms, exc):
        RecordingLoggingMiddleware.calls.append((elapsed_ms, exc))
        return super().log_exception(request, elapsed_ms, exc)


def _build_app(
    suppress_exceptions: bool = True,
    logging_middleware: type = RecordingLoggingMiddleware,
) -> FastAPI:
    app = FastAPI()

    @app.get("/ok")
    def ok():
        return {"answer": 42}

    @app.get("/missing")
    def missing():
        raise LessonPlanNotFoundError("abc")

    @app.get("/boom")
    def boom():
        raise RuntimeError("boom")

    @app.get("/text", response_class=PlainTextResponse)
    def text():
        return "plain"

    app.add_middleware(ApiResponseWrapperMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        logging_middleware,
        logger=logging.getLogger(LOGGER_NAME),
        suppress_exceptions=suppress_exceptions,
    )
    register_error_handlers(app)
    return app


@pytest.fixture(autouse=True)
def _reset_calls():
    RecordingLoggingMiddleware.calls = []
    yield


class TestResponseWrapper:
    def test_success_wrapped(self) -> None:
        body = TestClient(_build_app()).get("/ok").json()
        assert body == build_envelope(200, {"answer": 42})
        assert body["message"] == "Request successful."

    def test_handled_error_wrapped(self) -> None:
        response = TestClient(_build_app()).get("/missing")
        body = response.json()
        assert response.status_code == 404
        assert body["result"] is None
        assert body["responseException"] == {"error": "Lesson plan not found"}
        assert body["message"] == "Request responded with exceptions."

    def test_non_json_passes_through(self) -> None:
        response = TestClient(_build_app()).get("/text")
        assert response.text == "plain"

    def test_openapi_not_wrapped(self) -> None:
        body = TestClient(_build_app()).get("/openapi.json").json()
        assert "openapi" in body
        assert "statusCode" not in body


class TestRequestLogging:
    def test_success_logged_with_elapsed_time(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            TestClient(_build_app()).get("/ok")
        messages = [r.getMessage() for r in caplog.records if r.name == LOGGER_NAME]
        assert any(m.startswith("HTTP GET /ok responded 200 in ") for m in messages)
        assert RecordingLoggingMiddleware.calls == []

    def test_handled_domain_error_not_treated_as_fault(self) -> None:
        TestClient(_build_app()).get("/missing")
        assert RecordingLoggingMiddleware.calls == []

    def test_raising_handler_is_logged_and_enveloped(self, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            response = TestClient(_build_app()).get("/boom")

        assert len(RecordingLoggingMiddleware.calls) == 1
        elapsed_ms, exc = RecordingLoggingMiddleware.calls[0]
        assert elapsed_ms >= 0
        assert isinstance(exc, RuntimeError)
        assert str(exc) == "boom"

        body = response.json()
        assert response.status_code == 500
        assert body["statusCode"] == 500
        assert body["responseException"] == {"error": "Internal server error"}
        assert "boom" not in response.text
        assert response.headers["X-Request-ID"]

        error_records = [r for r in caplog.records if r.name == LOGGER_NAME]
        assert error_records and error_records[0].exc_info is not None
        assert error_records[0].request_id == response.headers["X-Request-ID"]

    def test_unsuppressed_fault_reaches_global_handler(self) -> None:
        client = TestClient(_build_app(suppress_exceptions=False), raise_server_exceptions=False)
        response = client.get("/boom")

        assert len(RecordingLoggingMiddleware.calls) == 1
        assert response.status_code == 500
        assert response.json() == build_envelope(500, {"error": "Internal server error"})

    @pytest.mark.parametrize("suppress_exceptions", [True, False])
    def test_fault_response_carries_security_headers(self, suppress_exceptions) -> None:
        client = TestClient(
            _build_app(suppress_exceptions=suppress_exceptions),
            raise_server_exceptions=False,
        )
        response = client.get("/boom")

        assert response.status_code == 500
        for name, value in security_headers("/boom").items():
            assert response.headers[name] == value

    def test_sensitive_headers_not_in_log_context(self) -> None:
        captured = {}

        class Capturing(RecordingLoggingMiddleware):
            def log_exception(self, request, elapsed_ms, exc):
                captured.update(self.log_for_error_context(request).extra)
                return True

        TestClient(_build_app(logging_middleware=Capturing)).get(
            "/boom",
            headers={"Authorization": "Bearer secret", "UserId": "u-1"},
        )
        assert "authorization" not in captured["request_headers"]
        assert captured["user_id"] == "u-1"
