"""
Serializers for property listings.

Related files:
    - models.py: Property model
    - views.py: Read-only listing endpoints
"""

from rest_framework import serializers

from authentication.serializers import UserIdentitySerializer
from properties.models import Property


class PropertyListSerializer(serializers.ModelSerializer):
    """Compact listing card used in search results."""

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "price",
            "location",
            "city",
            "property_type",
            "status",
            "bedrooms",
            "bathrooms",
            "area",
            "images",
            "is_featured",
            "realtor",
            "created_at",
        ]
        read_only_fields = fields


class PropertyDetailSerializer(serializers.ModelSerializer):
    """
    Full listing, including the realtor a customer would chat with.
    """

    realtor = UserIdentitySerializer(read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "description",
            "price",
            "location",
            "city",
            "property_type",
            "status",
            "bedrooms",
            "bathrooms",
            "area",
            "features",
            "images",
            "is_featured",
            "realtor",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
