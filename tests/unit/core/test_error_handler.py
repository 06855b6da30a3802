"""Тесты ErrorClassifier и обработки ответов."""

import asyncio
import logging

import httpx
import pytest

from api_client.core.error_handler import (
    ErrorClassifier,
    handle_api_error,
    log_api_error,
    process_response,
)
from api_client.core.exceptions import (
    ApiError,
    NetworkError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)


def json_response(status, body):
    return httpx.Response(status, json=body)


class TestClassifyResponse:
    """Классификация HTTP ответов."""

    @pytest.mark.parametrize("status,code,error_class", [
        (500, "server_error", ServerError),
        (503, "server_error", ServerError),
        (404, "not_found", NotFoundError),
        (422, "validation_error", ValidationError),
        (418, "unknown_error", ApiError),
    ])
    def test_status_mapping(self, status, code, error_class):
        error = ErrorClassifier.classify(httpx.Response(status), endpoint="resources")
        assert error.code == code
        assert error.status == status
        assert isinstance(error, error_class)

    def test_body_message_and_code(self):
        response = json_response(400, {"message": "Title is required", "code": "missing_title"})
        error = ErrorClassifier.classify(response, endpoint="resources")

        assert error.message == "Title is required"
        assert error.code == "missing_title"
        assert error.data == {"message": "Title is required", "code": "missing_title"}

    def test_reason_phrase_fallback(self):
        error = ErrorClassifier.classify(httpx.Response(404, text="nope"))
        assert error.message == "Not Found"

    def test_http_status_fallback(self):
        error = ErrorClassifier.classify(httpx.Response(599))
        assert error.message == "HTTP 599"
        assert error.code == "server_error"

    def test_http_status_error_uses_response(self):
        request = httpx.Request("GET", "https://api.example.com/api/resources")
        response = httpx.Response(503, request=request)
        exc = httpx.HTTPStatusError("503", request=request, response=response)

        assert ErrorClassifier.classify(exc).status == 503


class TestClassifyExceptions:
    """Классификация транспортных исключений."""

    @pytest.mark.parametrize("exc", [
        asyncio.TimeoutError(),
        httpx.ReadTimeout("read timeout"),
        httpx.ConnectTimeout("connect timeout"),
    ])
    def test_timeouts(self, exc):
        error = ErrorClassifier.classify(exc, endpoint="resources", timeout_ms=100)
        assert isinstance(error, TimeoutError)
        assert error.code == "timeout_error"
        assert error.status is None
        assert "100ms" in error.message

    @pytest.mark.parametrize("exc", [
        httpx.ConnectError("connection refused"),
        httpx.ReadError("reset"),
        ConnectionResetError("reset by peer"),
        httpx.RemoteProtocolError("Server disconnected without sending a response."),
    ])
    def test_network(self, exc):
        error = ErrorClassifier.classify(exc)
        assert isinstance(error, NetworkError)
        assert error.code == "network_error"
        assert error.status is None
        assert error.retryable is True

    def test_api_error_passthrough(self):
        original = ApiError("x", status=404)
        assert ErrorClassifier.classify(original) is original

    def test_unknown_exception(self):
        error = ErrorClassifier.classify(KeyError("boom"))
        assert error.code == "unknown_error"
        assert "boom" in error.message

    @pytest.mark.parametrize("raw", [None, 42, "just text", {"weird": True}, object()])
    def test_never_raises(self, raw):
        error = ErrorClassifier.classify(raw)
        assert isinstance(error, ApiError)
        assert error.code == "unknown_error"
        assert error.message

    def test_broken_str_still_classified(self):
        class Broken:
            def __str__(self):
                raise RuntimeError("no str")

        error = ErrorClassifier.classify(Broken())
        assert error.code == "unknown_error"
        assert error.message == "An unexpected error occurred."

    def test_is_retryable_error(self):
        assert ErrorClassifier.is_retryable_error(httpx.ConnectError("x")) is True
        assert ErrorClassifier.is_retryable_error(ValueError("x")) is False


class TestProcessResponse:
    """Разбор успешных и неуспешных ответов."""

    def test_json_body(self):
        assert process_response(json_response(200, {"ok": True})) == {"ok": True}

    def test_text_body(self):
        assert process_response(httpx.Response(200, text="pong")) == "pong"

    def test_error_status_raises(self):
        with pytest.raises(NotFoundError) as exc_info:
            process_response(json_response(404, {"message": "Resource not found"}), "resources/9")
        assert exc_info.value.message == "Resource not found"
        assert exc_info.value.endpoint == "resources/9"

    def test_invalid_json_raises_api_error(self):
        response = httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})
        with pytest.raises(ApiError) as exc_info:
            process_response(response)
        assert exc_info.value.code == "unknown_error"


class TestLogging:
    """log_api_error и handle_api_error."""

    def test_log_error(self, caplog):
        with caplog.at_level(logging.ERROR, logger="api_client"):
            log_api_error(ApiError("boom", status=500), "GET resources")

        assert "API error [GET resources]: boom" in caplog.text

    def test_production_skips_non_error_levels(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="api_client"):
            log_api_error(ApiError("x"), "ctx", level="warn", environment="production")

        assert caplog.records == []

    def test_production_logs_errors(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="api_client"):
            log_api_error(ApiError("x"), "ctx", level="error", environment="production")

        assert len(caplog.records) == 1

    def test_handle_api_error_envelope(self, caplog):
        with caplog.at_level(logging.ERROR, logger="api_client"):
            envelope = handle_api_error(httpx.ConnectError("refused"), "load resources")

        assert envelope["code"] == "network_error"
        assert envelope["is_api_error"] is True
        assert "details" in envelope
        assert caplog.records

    def test_handle_api_error_production_hides_details(self):
        envelope = handle_api_error(ApiError("x", status=500), environment="production")
        assert "details" not in envelope
