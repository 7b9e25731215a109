"""
Tests for viewings app.

This package contains test modules for:
- test_models.py: Viewing status flow
- test_services.py: ViewingService tests
- test_views.py: REST API endpoint tests
"""
