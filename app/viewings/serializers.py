"""
Serializers for viewings.

Related files:
    - models.py: Viewing model
    - services.py: Booking and status rules
"""

from rest_framework import serializers

from authentication.serializers import UserIdentitySerializer
from properties.models import Property
from viewings.models import Viewing, ViewingStatus


class ViewingPropertySerializer(serializers.ModelSerializer):
    """Listing fields shown next to a viewing."""

    class Meta:
        model = Property
        fields = ["id", "title", "location", "images"]
        read_only_fields = fields


class ViewingSerializer(serializers.ModelSerializer):
    property = ViewingPropertySerializer(read_only=True)
    customer = UserIdentitySerializer(read_only=True)

    class Meta:
        model = Viewing
        fields = [
            "id",
            "property",
            "customer",
            "scheduled_at",
            "status",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ViewingCreateSerializer(serializers.Serializer):
    property_id = serializers.UUIDField()
    scheduled_at = serializers.DateTimeField()
    notes = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")


class ViewingStatusSerializer(serializers.Serializer):
    """Realtor decision on a viewing. Pending is never a target."""

    status = serializers.ChoiceField(
        choices=[
            ViewingStatus.APPROVED,
            ViewingStatus.REJECTED,
            ViewingStatus.COMPLETED,
        ]
    )
