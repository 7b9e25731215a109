"""
Serializers for chat API.

Serializers:
    ThreadSummarySerializer: Thread list item / find-or-create result
    ThreadSerializer: Thread detail
    ThreadCreateSerializer: Input for starting a thread
    MessageSerializer: Message output
    MessageCreateSerializer: Input for sending a message

Related files:
    - services.py: ThreadSummary dataclass and business logic
    - views.py: API endpoints
"""

from rest_framework import serializers

from authentication.serializers import UserIdentitySerializer
from properties.models import Property

from chat.models import Message, Thread


class ThreadSummarySerializer(serializers.Serializer):
    """
    Serializes chat.services.ThreadSummary.

    Enrichment fields are empty when the property or counterpart could not
    be resolved.
    """

    id = serializers.IntegerField()
    property_id = serializers.UUIDField()
    customer_id = serializers.IntegerField()
    realtor_id = serializers.IntegerField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    property_title = serializers.CharField()
    property_location = serializers.CharField()
    counterpart_id = serializers.IntegerField(allow_null=True)
    counterpart_name = serializers.CharField()
    counterpart_role = serializers.CharField()
    last_message_body = serializers.CharField()
    last_message_at = serializers.DateTimeField(allow_null=True)
    last_message_sender_id = serializers.IntegerField(allow_null=True)


class ThreadPropertySerializer(serializers.ModelSerializer):
    """Listing fields shown in a thread header."""

    class Meta:
        model = Property
        fields = ["id", "title", "location", "price", "status"]
        read_only_fields = fields


class ThreadSerializer(serializers.ModelSerializer):
    """Thread detail with both participants."""

    property = ThreadPropertySerializer(read_only=True)
    customer = UserIdentitySerializer(read_only=True)
    realtor = UserIdentitySerializer(read_only=True)

    class Meta:
        model = Thread
        fields = [
            "id",
            "property",
            "customer",
            "realtor",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ThreadCreateSerializer(serializers.Serializer):
    """
    Input for POST /threads/.

    The current user is always the customer. ``realtor_id`` defaults to the
    listing's realtor.
    """

    property_id = serializers.UUIDField()
    realtor_id = serializers.IntegerField(required=False, min_value=1)


class MessageSerializer(serializers.ModelSerializer):
    """Message with sender identity."""

    thread_id = serializers.IntegerField(read_only=True)
    sender = UserIdentitySerializer(read_only=True)

    class Meta:
        model = Message
        fields = ["id", "thread_id", "sender", "body", "created_at"]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Input for sending a message.

    Trimming and length checks are done by MessageService so the REST API
    and the WebSocket consumer reject the same bodies.
    """

    body = serializers.CharField(allow_blank=True, trim_whitespace=False)
