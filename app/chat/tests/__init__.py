"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Thread, Message model tests
- test_services.py: ThreadService and MessageService tests
- test_realtime.py: Change-feed publishing tests
- test_bridge.py: MessageFeedBridge queue tests
- test_panel.py: ChatPanel routing and state tests
- test_consumers.py: WebSocket consumer tests
- test_middleware.py: WebSocket JWT authentication tests
- test_views.py: REST API endpoint tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_consumers.py
"""
