from __future__ import annotations

import json
import pytest
from unittest.mock import Mock, patch
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from library_store.core.errors import (
    ErrorBody,
    _describe_validation_errors,
    register_exception_handlers,
)


def _mock_request(method: str = "GET") -> Mock:
    mock_request = Mock()
    mock_request.state.correlation_id = "test-123"
    mock_request.url.path = "/test"
    mock_request.method = method
    return mock_request


class TestErrorHelpers:
    """Test error helper functions."""

    def test_error_body(self):
        assert ErrorBody(error="boom").model_dump() == {"error": "boom"}

    def test_describe_missing_required_field(self):
        errors = [{"loc": ("body", "author"), "msg": "Field required", "type": "missing"}]

        assert _describe_validation_errors(errors) == "Title and author are required"

    def test_describe_other_fields(self):
        errors = [
            {"loc": ("body", "total_copies"), "msg": "Input should be greater than or equal to 0", "type": "greater_than_equal"},
            {"loc": ("path", "book_id"), "msg": "Input should be a valid integer", "type": "int_parsing"},
        ]

        message = _describe_validation_errors(errors)

        assert message.startswith("Invalid request payload: ")
        assert "total_copies: Input should be greater than or equal to 0" in message
        assert "path.book_id: Input should be a valid integer" in message

    def test_describe_required_field_wins(self):
        errors = [
            {"loc": ("body", "total_copies"), "msg": "bad", "type": "x"},
            {"loc": ("body", "title"), "msg": "Field required", "type": "missing"},
        ]

        assert _describe_validation_errors(errors) == "Title and author are required"


class TestExceptionHandlers:
    """Test exception handler registration and execution."""

    def setup_method(self):
        """Set up test app for each test."""
        self.app = FastAPI()
        register_exception_handlers(self.app)

    @patch('library_store.core.errors.get_logger')
    @pytest.mark.asyncio
    async def test_http_exception_handler(self, mock_get_logger):
        mock_logger = Mock()
        mock_get_logger.return_value = mock_logger

        exc = StarletteHTTPException(status_code=HTTP_404_NOT_FOUND, detail="Book not found")

        handler = self.app.exception_handlers.get(StarletteHTTPException)
        response = await handler(_mock_request(), exc)

        assert response.status_code == HTTP_404_NOT_FOUND
        assert json.loads(response.body) == {"error": "Book not found"}
        mock_logger.warning.assert_called_once_with("HTTP error", extra={"status_code": HTTP_404_NOT_FOUND})

    @patch('library_store.core.errors.get_logger')
    @pytest.mark.asyncio
    async def test_validation_exception_handler(self, mock_get_logger):
        mock_get_logger.return_value = Mock()

        exc = RequestValidationError([{"loc": ("body", "title"), "msg": "Field required", "type": "missing"}])

        handler = self.app.exception_handlers.get(RequestValidationError)
        response = await handler(_mock_request("POST"), exc)

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert json.loads(response.body) == {"error": "Title and author are required"}

    @patch('library_store.core.errors.get_logger')
    @pytest.mark.asyncio
    async def test_integrity_error_unique(self, mock_get_logger):
        mock_get_logger.return_value = Mock()

        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: books.isbn"))

        handler = self.app.exception_handlers.get(IntegrityError)
        response = await handler(_mock_request("POST"), exc)

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert json.loads(response.body) == {"error": "ISBN already exists"}

    @patch('library_store.core.errors.get_logger')
    @pytest.mark.asyncio
    async def test_integrity_error_other(self, mock_get_logger):
        mock_get_logger.return_value = Mock()

        exc = IntegrityError("INSERT", {}, Exception("CHECK constraint failed"))

        handler = self.app.exception_handlers.get(IntegrityError)
        response = await handler(_mock_request("POST"), exc)

        assert json.loads(response.body) == {"error": "Data integrity violation"}

    @patch('library_store.core.errors.get_logger')
    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_raw_message(self, mock_get_logger):
        mock_logger = Mock()
        mock_get_logger.return_value = mock_logger

        handler = self.app.exception_handlers.get(Exception)
        response = await handler(_mock_request(), RuntimeError("disk I/O error"))

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert json.loads(response.body) == {"error": "disk I/O error"}
        assert response.headers["X-Request-ID"] == "test-123"
        mock_logger.exception.assert_called_once()

    @patch('library_store.core.errors.get_logger')
    @pytest.mark.asyncio
    async def test_validation_logged_as_warning(self, mock_get_logger):
        mock_logger = Mock()
        mock_get_logger.return_value = mock_logger

        exc = RequestValidationError([{"loc": ("body", "total_copies"), "msg": "bad", "type": "x"}])

        handler = self.app.exception_handlers.get(RequestValidationError)
        await handler(_mock_request("PUT"), exc)

        mock_logger.warning.assert_called_once_with("Validation error")
        mock_logger.info.assert_not_called()


class TestHandlersThroughApp:
    """Errors raised inside routes reach the client as {error: ...}."""

    def setup_method(self):
        self.app = FastAPI()
        register_exception_handlers(self.app)

        @self.app.get("/boom")
        def boom():
            raise RuntimeError("database is locked")

        self.client = TestClient(self.app, raise_server_exceptions=False)

    def test_unhandled_error(self):
        response = self.client.get("/boom")

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "database is locked"}

    def test_unknown_route(self):
        response = self.client.get("/missing")

        assert response.status_code == HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Not Found"}
