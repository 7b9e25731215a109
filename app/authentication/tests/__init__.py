"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User model and manager tests
- test_views.py: Token and current-user endpoint tests

Usage:
    pytest authentication/tests/
"""
