"""
URL configuration for the estate chat backend.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        token/                     - Obtain JWT pair (email/password)
        token/refresh/             - Refresh access token
        me/                        - Current user
    /api/v1/properties/            - Property listings
        {id}/                      - Listing detail
        {id}/chat/                 - Start chat with the listing's realtor
    /api/v1/chat/                  - Chat endpoints
        threads/                   - Thread list / find-or-create
        threads/{id}/              - Thread detail
        threads/{id}/archive/      - Archive thread
        threads/{id}/messages/     - Message list/send

WebSocket routes live in chat/routing.py (see config/asgi.py).

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication (simplejwt)
    path("auth/", include("authentication.urls")),
    # Listings
    path("properties/", include("properties.urls")),
    # Chat
    path("chat/", include("chat.urls")),
    # Viewings
    path("viewings/", include("viewings.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Estate Chat Admin"
admin.site.site_title = "Estate Chat"
admin.site.index_title = "Listings and chat"
