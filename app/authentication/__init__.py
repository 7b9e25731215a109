"""
Authentication application.

This app provides the marketplace user model and JWT-based authentication
for the REST API and the chat WebSocket.

Key components:
    - User model: Email-based account with a marketplace role
    - UserSerializer: Public user representation
    - Token endpoints: JWT obtain/refresh via djangorestframework-simplejwt

Usage:
    from authentication.models import User, UserRole
"""
