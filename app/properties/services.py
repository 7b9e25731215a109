"""
Property listing services.

Services:
    PropertyService: Listing lookups used by the listing API and by chat

Chat resolves a thread's property through get_property_details(); a
missing or malformed id is an expected NOT_FOUND failure rather than an
exception.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from core.exceptions import NOT_FOUND
from core.services import BaseService, ServiceResult
from properties.models import Property

if TYPE_CHECKING:
    from django.db.models import QuerySet


def parse_property_id(value) -> uuid.UUID | None:
    """Return value as a UUID, or None when it is not one."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


class PropertyService(BaseService):
    """Read access to property listings."""

    @classmethod
    def get_property_details(cls, property_id) -> ServiceResult[Property]:
        """
        Fetch a listing with its realtor.

        Args:
            property_id: Listing UUID (string or UUID)

        Returns:
            ServiceResult with the Property, or NOT_FOUND
        """
        pk = parse_property_id(property_id)
        if pk is None:
            return ServiceResult.failure("Property not found", error_code=NOT_FOUND)

        with cls.backend_call("get property details"):
            prop = Property.objects.select_related("realtor").filter(pk=pk).first()

        if prop is None:
            return ServiceResult.failure("Property not found", error_code=NOT_FOUND)
        return ServiceResult.success(prop)

    @classmethod
    def list_properties(cls, user=None, realtor_id=None) -> QuerySet[Property]:
        """
        Listings visible to ``user``, newest first.

        Active listings are public; pending and rejected listings are only
        returned to their own realtor. ``realtor_id`` narrows the result to
        one realtor's listings.
        """
        queryset = Property.objects.visible_to(user).select_related("realtor")
        if realtor_id is not None:
            queryset = queryset.filter(realtor_id=realtor_id)
        return queryset.order_by("-created_at")
