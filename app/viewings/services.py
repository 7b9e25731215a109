"""
Viewing services.

Services:
    ViewingService: Book viewings, list them per listing or per customer,
    and move them through their status flow

Design Decisions:
    - Only active listings can be booked, and never by their own realtor
    - Only the listing's realtor (or staff) sees a listing's viewings and
      changes their status
    - Lists are ordered by scheduled_at ascending
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from django.utils import timezone

from core.exceptions import NOT_FOUND, PERMISSION_DENIED, UNAUTHENTICATED, VALIDATION_ERROR
from core.services import BaseService, ServiceResult
from properties.models import PropertyStatus
from properties.services import PropertyService
from viewings.models import Viewing, ViewingStatus

if TYPE_CHECKING:
    from authentication.models import User
    from properties.models import Property


def _require_user(user) -> ServiceResult | None:
    if user is None or not user.is_authenticated:
        return ServiceResult.failure("Authentication required", error_code=UNAUTHENTICATED)
    return None


def _as_uuid(value) -> uuid.UUID | None:
    try:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _manages(user: User, prop: Property) -> bool:
    return user.is_staff or prop.realtor_id == user.pk


class ViewingService(BaseService):
    """
    Service for property viewings.

    Methods:
        schedule_viewing: Book a pending viewing for the current user
        get_property_viewings: Viewings of one listing (its realtor only)
        get_user_viewings: Viewings booked by the current user
        update_viewing_status: Approve, reject or complete a viewing
    """

    @classmethod
    def schedule_viewing(
        cls,
        user: User,
        property_id,
        scheduled_at: datetime,
        notes: str = "",
    ) -> ServiceResult[Viewing]:
        """
        Book a viewing with status pending.

        Error codes:
            UNAUTHENTICATED: No user
            NOT_FOUND: Listing missing or not visible
            VALIDATION_ERROR: Listing not active, own listing, or time in the past
        """
        if (failure := _require_user(user)) is not None:
            return failure

        validation = cls.validate_required(property_id=property_id, scheduled_at=scheduled_at)
        if validation is not None:
            return validation

        lookup = PropertyService.get_property_details(property_id)
        if not lookup.success:
            return lookup
        prop = lookup.data

        if prop.status != PropertyStatus.ACTIVE:
            return ServiceResult.failure(
                "Viewings can only be booked for active listings",
                error_code=VALIDATION_ERROR,
                errors={"property_id": ["This listing is not open for viewings."]},
            )
        if prop.realtor_id == user.pk:
            return ServiceResult.failure(
                "Realtors cannot book viewings of their own listings",
                error_code=VALIDATION_ERROR,
                errors={"property_id": ["You own this listing."]},
            )
        if scheduled_at <= timezone.now():
            return ServiceResult.failure(
                "Viewing time must be in the future",
                error_code=VALIDATION_ERROR,
                errors={"scheduled_at": ["Choose a time in the future."]},
            )

        with cls.backend_call("schedule viewing"):
            viewing = Viewing.objects.create(
                property=prop,
                customer=user,
                scheduled_at=scheduled_at,
                notes=(notes or "").strip(),
                status=ViewingStatus.PENDING,
            )

        cls.get_logger().info(
            f"User {user.pk} booked viewing {viewing.pk} of property {prop.pk} "
            f"for {scheduled_at.isoformat()}"
        )
        return ServiceResult.success(viewing)

    @classmethod
    def get_property_viewings(cls, user: User, property_id) -> ServiceResult[list[Viewing]]:
        """All viewings of a listing, soonest first, with the booking customer."""
        if (failure := _require_user(user)) is not None:
            return failure

        lookup = PropertyService.get_property_details(property_id)
        if not lookup.success:
            return lookup
        if not _manages(user, lookup.data):
            return ServiceResult.failure(
                "Only the listing's realtor can see its viewings",
                error_code=PERMISSION_DENIED,
            )

        with cls.backend_call("list property viewings"):
            viewings = list(
                Viewing.objects.filter(property_id=lookup.data.pk)
                .select_related("customer", "property")
                .order_by("scheduled_at")
            )
        return ServiceResult.success(viewings)

    @classmethod
    def get_user_viewings(cls, user: User) -> ServiceResult[list[Viewing]]:
        """Viewings booked by ``user``, soonest first, with their listing."""
        if (failure := _require_user(user)) is not None:
            return failure

        with cls.backend_call("list user viewings"):
            viewings = list(
                Viewing.objects.filter(customer=user)
                .select_related("property", "customer")
                .order_by("scheduled_at")
            )
        return ServiceResult.success(viewings)

    @classmethod
    def update_viewing_status(cls, user: User, viewing_id, status: str) -> ServiceResult[Viewing]:
        """
        Move a viewing to ``status``.

        Allowed moves are listed in viewings.models.VIEWING_TRANSITIONS.

        Error codes:
            NOT_FOUND: Unknown viewing
            PERMISSION_DENIED: User is not the listing's realtor
            VALIDATION_ERROR: Unknown status or move not allowed
        """
        if (failure := _require_user(user)) is not None:
            return failure

        if status not in ViewingStatus.values:
            return ServiceResult.failure(
                f"Unknown viewing status: {status}",
                error_code=VALIDATION_ERROR,
                errors={"status": [f'"{status}" is not a valid choice.']},
            )

        pk = _as_uuid(viewing_id)
        viewing = None
        if pk is not None:
            with cls.backend_call("get viewing"):
                viewing = Viewing.objects.select_related("property", "customer").filter(pk=pk).first()
        if viewing is None:
            return ServiceResult.failure("Viewing not found", error_code=NOT_FOUND)

        if not _manages(user, viewing.property):
            return ServiceResult.failure(
                "Only the listing's realtor can change this viewing",
                error_code=PERMISSION_DENIED,
            )
        if not viewing.can_move_to(status):
            return ServiceResult.failure(
                f"Cannot move a {viewing.status} viewing to {status}",
                error_code=VALIDATION_ERROR,
                errors={"status": [f"Not allowed from {viewing.status}."]},
            )

        previous = viewing.status
        viewing.status = status
        with cls.backend_call("update viewing status"):
            viewing.save(update_fields=["status", "updated_at"])

        cls.get_logger().info(f"Viewing {viewing.pk} moved from {previous} to {status} by user {user.pk}")
        return ServiceResult.success(viewing)
