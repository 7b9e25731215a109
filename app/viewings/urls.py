"""
URL configuration for viewings.

All URLs are prefixed with /api/v1/viewings/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from viewings.views import ViewingViewSet

router = SimpleRouter()
router.register(r"", ViewingViewSet, basename="viewing")

app_name = "viewings"

urlpatterns = [
    path("", include(router.urls)),
]
