"""
Serializers for authentication models.

Related files:
    - models.py: User model
    - views.py: Current-user endpoint
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User model (read operations).

    Used for the /api/v1/auth/me/ endpoint.
    """

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "display_name",
            "role",
            "date_joined",
        ]
        read_only_fields = fields


class UserIdentitySerializer(serializers.ModelSerializer):
    """Minimal identity embedded in thread and message payloads."""

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "display_name", "role"]
        read_only_fields = fields
