"""
Tests for app/main.py - FastAPI application, error mapping and health checks.
"""
import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi import status
from fastapi.responses import JSONResponse

from app.core.exceptions import DuplicateEmailError, EmployeeNotFoundError, EmployeeServiceError


class TestHealthEndpoint:
    """Test application health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_check_healthy(self):
        """Health check should return healthy when DB is connected."""
        from app.main import health_check

        with patch("app.main.check_db_connection", new_callable=AsyncMock) as mock_db:
            mock_db.return_value = True

            response = await health_check()

        assert response.status == "healthy"
        assert response.checks["database"] is True

    @pytest.mark.asyncio
    async def test_health_check_unhealthy_when_db_down(self):
        """Health check should return 503 when DB is down."""
        from app.main import health_check

        with patch("app.main.check_db_connection", new_callable=AsyncMock) as mock_db:
            mock_db.return_value = False

            response = await health_check()

        assert isinstance(response, JSONResponse)
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert b'"unhealthy"' in response.body

    @pytest.mark.asyncio
    async def test_health_route_over_http(self, client):
        with patch("app.main.check_db_connection", new_callable=AsyncMock, return_value=True):
            response = await client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["service"] == "employee-directory"


class TestDomainErrorHandler:
    """Test mapping of domain errors to status codes."""

    @pytest.mark.asyncio
    async def test_duplicate_email_maps_to_409(self, mock_request):
        from app.main import employee_error_handler

        response = await employee_error_handler(mock_request, DuplicateEmailError("a@b.com"))

        assert response.status_code == status.HTTP_409_CONFLICT
        content = response.body.decode()
        assert "DuplicateEmail" in content
        assert "a@b.com" in content

    @pytest.mark.asyncio
    async def test_not_found_maps_to_404(self, mock_request):
        from app.main import employee_error_handler

        response = await employee_error_handler(mock_request, EmployeeNotFoundError(999))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "NotFound" in response.body.decode()

    @pytest.mark.asyncio
    async def test_unmapped_domain_error_is_400(self, mock_request):
        from app.main import employee_error_handler

        response = await employee_error_handler(mock_request, EmployeeServiceError("rejected"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "EmployeeServiceError" in response.body.decode()


class TestGlobalExceptionHandler:
    """Test global exception handler."""

    @pytest.mark.asyncio
    async def test_exception_handler_in_dev_includes_details(self, mock_request):
        """In development, exception details should be included."""
        from app.main import global_exception_handler

        response = await global_exception_handler(mock_request, ValueError("Test error message"))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        content = response.body.decode()
        assert "ValueError" in content
        assert "Test error message" in content
        assert json.loads(content)["timestamp"].endswith("+00:00")

    @pytest.mark.asyncio
    async def test_exception_handler_in_production_hides_details(self, mock_request):
        """In production, only a reference ID is returned."""
        from app import main

        production_settings = MagicMock(IS_PRODUCTION=True)
        with patch.object(main, "settings", production_settings):
            response = await main.global_exception_handler(mock_request, ValueError("secret detail"))

        content = response.body.decode()
        assert "secret detail" not in content
        assert "Reference ID" in content


class TestRootEndpoint:
    """Test root endpoint."""

    @pytest.mark.asyncio
    async def test_root_returns_welcome(self):
        """Root endpoint should return welcome message."""
        from app.main import root

        response = await root()

        assert "message" in response
        assert "Employee Directory" in response["message"]


class TestDatabaseConnection:
    """Test database connection check."""

    @pytest.mark.asyncio
    async def test_check_db_connection_success(self):
        """DB check should return True on successful connection."""
        from app.db.session import check_db_connection

        mock_engine = MagicMock()
        mock_connection = AsyncMock()
        mock_engine.connect = MagicMock(return_value=mock_connection)
        mock_connection.__aenter__ = AsyncMock(return_value=mock_connection)
        mock_connection.__aexit__ = AsyncMock(return_value=None)
        mock_connection.execute = AsyncMock()

        with patch("app.db.session.engine", mock_engine):
            result = await check_db_connection()

        assert result is True

    @pytest.mark.asyncio
    async def test_check_db_connection_failure(self):
        """DB check should return False on connection failure."""
        from app.db.session import check_db_connection

        mock_engine = MagicMock()
        mock_engine.connect = MagicMock(side_effect=OSError("Connection refused"))

        with patch("app.db.session.engine", mock_engine):
            result = await check_db_connection()

        assert result is False


class TestErrorResponseModel:
    """Test ErrorResponse Pydantic model."""

    def test_error_response_optional_fields(self):
        """ErrorResponse should allow None for optional fields."""
        from app.main import ErrorResponse

        response = ErrorResponse(
            error="TestError",
            timestamp="2024-01-01T00:00:00"
        )

        assert response.detail is None
        assert response.path is None
