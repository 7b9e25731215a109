"""
Property listing models.

Models:
    Property: A listing published by a realtor

Design Decisions:
    - UUID primary keys (listing ids appear in public URLs)
    - Price is a Decimal; area is free text because listings mix units
    - Images and features are JSON lists rather than child tables
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class PropertyStatus(models.TextChoices):
    """
    Moderation status of a listing.

    ACTIVE: Visible to everyone
    PENDING: Awaiting admin review, visible to its realtor only
    REJECTED: Declined by an admin, visible to its realtor only
    """

    ACTIVE = "active", "Active"
    PENDING = "pending", "Pending"
    REJECTED = "rejected", "Rejected"


class PropertyQuerySet(models.QuerySet):
    """QuerySet helpers for listing visibility."""

    def active(self):
        return self.filter(status=PropertyStatus.ACTIVE)

    def visible_to(self, user):
        """Active listings plus the user's own listings in any status."""
        if user is None or not user.is_authenticated:
            return self.active()
        return self.filter(models.Q(status=PropertyStatus.ACTIVE) | models.Q(realtor=user))


class Property(UUIDPrimaryKeyMixin, BaseModel):
    """
    A property listing.

    Fields:
        title: Headline shown in listings and chat threads
        description: Long-form description
        price: Asking price
        location: Street/neighbourhood shown next to the title
        city: City used for search
        property_type: Free-form type (apartment, house, ...)
        status: Moderation status
        bedrooms / bathrooms: Room counts
        area: Living area as entered by the realtor
        features: List of feature labels
        images: List of image URLs
        is_featured: Promoted on the home page
        realtor: Owning realtor (chat counterpart for customers)
    """

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=14, decimal_places=2)
    location = models.CharField(max_length=255)
    city = models.CharField(max_length=100, db_index=True)
    property_type = models.CharField(max_length=50)
    status = models.CharField(
        max_length=10,
        choices=PropertyStatus.choices,
        default=PropertyStatus.ACTIVE,
        db_index=True,
    )
    bedrooms = models.PositiveSmallIntegerField(default=0)
    bathrooms = models.PositiveSmallIntegerField(default=0)
    area = models.CharField(max_length=50, blank=True, default="")
    features = models.JSONField(default=list, blank=True)
    images = models.JSONField(default=list, blank=True)
    is_featured = models.BooleanField(default=False)

    realtor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
        help_text="Realtor who owns this listing",
    )

    objects = PropertyQuerySet.as_manager()

    class Meta:
        db_table = "properties"
        ordering = ["-created_at"]
        verbose_name_plural = "properties"
        indexes = [
            models.Index(fields=["realtor", "-created_at"], name="property_realtor_idx"),
        ]

    def __str__(self) -> str:
        return self.title
