"""
Property listing views.

URL Structure:
    /api/v1/properties/               GET (filters: realtor, city, property_type, is_featured)
    /api/v1/properties/{id}/          GET
    /api/v1/properties/{id}/chat/     POST - start a chat with the listing's realtor

Listings are public. Pending and rejected listings are only visible to
their own realtor. Starting a chat requires authentication.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from chat.serializers import ThreadSummarySerializer
from chat.services import ThreadService
from chat.session import ChatSession
from core.views import failure_response
from properties.filters import PropertyFilter
from properties.serializers import PropertyDetailSerializer, PropertyListSerializer
from properties.services import PropertyService


@extend_schema_view(
    list=extend_schema(
        operation_id="list_properties",
        summary="List properties",
        tags=["Properties"],
    ),
    retrieve=extend_schema(
        operation_id="get_property",
        summary="Get property",
        tags=["Properties"],
    ),
)
class PropertyViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only listing endpoints plus the "chat with realtor" action.

    list:
        Visible listings, newest first.

    retrieve:
        One listing with its realtor.

    chat:
        Find or create the current user's thread with the listing's realtor.
    """

    permission_classes = [AllowAny]
    filter_backends = [DjangoFilterBackend]
    filterset_class = PropertyFilter

    def get_queryset(self):
        return PropertyService.list_properties(self.request.user)

    def get_serializer_class(self):
        if self.action == "list":
            return PropertyListSerializer
        return PropertyDetailSerializer

    def get_permissions(self):
        if self.action == "chat":
            return [IsAuthenticated()]
        return [AllowAny()]

    @extend_schema(
        operation_id="start_property_chat",
        summary="Chat with realtor",
        request=None,
        responses={200: ThreadSummarySerializer, 201: ThreadSummarySerializer},
        tags=["Properties"],
    )
    @action(detail=True, methods=["post"])
    def chat(self, request, pk=None):
        """Start (or reopen) a chat about this listing."""
        prop = self.get_object()

        result = ThreadService.start_thread_for_property(ChatSession.from_user(request.user), prop.pk)
        if not result.success:
            return failure_response(result)

        status_code = status.HTTP_201_CREATED if result.data.created else status.HTTP_200_OK
        return Response(ThreadSummarySerializer(result.data).data, status=status_code)
