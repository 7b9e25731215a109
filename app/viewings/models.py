"""
Viewing models.

Models:
    Viewing: A customer's request to visit a listing at a given time

Status flow:
    pending  -> approved | rejected
    approved -> completed | rejected
    rejected and completed are final

The listing's realtor moves a viewing along; customers only create them.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class ViewingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    COMPLETED = "completed", "Completed"


# Statuses a viewing may move to from each status
VIEWING_TRANSITIONS: dict[str, frozenset[str]] = {
    ViewingStatus.PENDING: frozenset({ViewingStatus.APPROVED, ViewingStatus.REJECTED}),
    ViewingStatus.APPROVED: frozenset({ViewingStatus.COMPLETED, ViewingStatus.REJECTED}),
    ViewingStatus.REJECTED: frozenset(),
    ViewingStatus.COMPLETED: frozenset(),
}


class Viewing(UUIDPrimaryKeyMixin, BaseModel):
    """
    A scheduled visit to a property.

    Fields:
        property: Listing to visit
        customer: User who booked the visit (stored in the ``user_id`` column)
        scheduled_at: Requested date and time
        status: Where the request stands
        notes: Free text from the customer
    """

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="viewings",
        help_text="Listing to visit",
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        db_column="user_id",
        related_name="viewings",
        help_text="Customer who booked the viewing",
    )
    scheduled_at = models.DateTimeField(db_index=True)
    status = models.CharField(
        max_length=10,
        choices=ViewingStatus.choices,
        default=ViewingStatus.PENDING,
        db_index=True,
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "viewings"
        ordering = ["scheduled_at"]
        indexes = [
            models.Index(fields=["property", "scheduled_at"], name="viewing_property_idx"),
            models.Index(fields=["customer", "scheduled_at"], name="viewing_customer_idx"),
        ]

    def __str__(self) -> str:
        return f"Viewing {self.pk} ({self.status})"

    def can_move_to(self, status: str) -> bool:
        return status in VIEWING_TRANSITIONS.get(self.status, frozenset())
