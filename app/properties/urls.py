"""
URL configuration for property listings.

All URLs are prefixed with /api/v1/properties/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from properties.views import PropertyViewSet

router = SimpleRouter()
router.register(r"", PropertyViewSet, basename="property")

app_name = "properties"

urlpatterns = [
    path("", include(router.urls)),
]
