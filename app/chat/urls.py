"""
URL configuration for chat API.

URL Structure:
    /threads/                  GET, POST
    /threads/{id}/             GET
    /threads/{id}/archive/     POST
    /threads/{id}/messages/    GET, POST

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ThreadViewSet

router = DefaultRouter()
router.register(r"threads", ThreadViewSet, basename="thread")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
]
