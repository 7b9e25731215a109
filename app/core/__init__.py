"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps (authentication,
properties, chat). Nothing in here knows about listings or chat threads.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Input validation failures
    - NotFoundError: Resource not found
    - UnauthenticatedError: Missing session
    - PermissionDeniedError: Authorization failures
    - BackendUnavailableError: Database/channel layer failures

Views (import from core.views):
    - health_check: Database and cache health endpoint
"""
