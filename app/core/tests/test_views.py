"""
Tests for core views: health check and the API exception handler.
"""

from unittest import mock

from django.db import OperationalError
from rest_framework.exceptions import NotAuthenticated

from core.exceptions import BackendUnavailableError
from core.views import api_exception_handler


class TestHealthCheck:
    def test_healthy(self, client, db):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_database_down(self, client, db):
        with mock.patch("core.views.connection.cursor", side_effect=OperationalError("down")):
            response = client.get("/health/")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestApiExceptionHandler:
    def test_application_error_rendered_without_details(self):
        exc = BackendUnavailableError("Backend unavailable", details={"operation": "send"})

        response = api_exception_handler(exc, {"view": None})

        assert response.status_code == 503
        assert response.data == {
            "error": "Backend unavailable",
            "error_code": "BACKEND_UNAVAILABLE",
        }

    def test_drf_errors_fall_through(self):
        response = api_exception_handler(NotAuthenticated(), {"view": None})

        assert response.status_code == 401
