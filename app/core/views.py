"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the marketplace domain but
are needed to operate it: the health check, the DRF exception handler
that maps application errors to HTTP responses, and failure_response()
for rendering failed ServiceResults in API views.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError, status_for_error_code

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Health check endpoint for load balancers and container orchestrators.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - cache: "connected" or "disconnected"

    HTTP Status Codes:
        200: Database reachable (cache is best-effort)
        503: Database unreachable
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        logger.warning("Health check could not reach the database", exc_info=True)
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    # django-redis is configured with IGNORE_EXCEPTIONS, so an outage reads as a miss
    cache.set("health_check", "ok", timeout=1)
    if cache.get("health_check") == "ok":
        health_status["cache"] = "connected"
    else:
        health_status["cache"] = "disconnected"

    status_code = 200 if is_healthy else 503
    return JsonResponse(health_status, status=status_code)


def failure_response(result) -> Response:
    """Render a failed ServiceResult with the status for its error code."""
    body = {"error": result.error, "error_code": result.error_code}
    if result.errors:
        body["errors"] = result.errors
    return Response(body, status=status_for_error_code(result.error_code))


def api_exception_handler(exc, context):
    """
    DRF exception handler that also renders application errors.

    BaseApplicationError subclasses raised from services (for example
    BackendUnavailableError) become ``{"error", "error_code"}`` bodies with
    the exception's ``http_status``. Everything else falls through to DRF's
    default handler.
    """
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        logger.warning(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: {exc}"
        )
        body = exc.to_dict()
        # Internal details stay in the logs
        body.pop("details", None)
        return Response(body, status=exc.http_status)
    return exception_handler(exc, context)
