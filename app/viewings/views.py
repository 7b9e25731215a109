"""
ViewSets for viewings.

URL Structure:
    /api/v1/viewings/                            GET (own), POST (book)
    /api/v1/viewings/property/{property_id}/     GET (listing's realtor)
    /api/v1/viewings/{id}/status/                POST (listing's realtor)
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.views import failure_response
from viewings.serializers import ViewingCreateSerializer, ViewingSerializer, ViewingStatusSerializer
from viewings.services import ViewingService


@extend_schema_view(
    list=extend_schema(
        operation_id="list_my_viewings",
        summary="List my viewings",
        responses={200: ViewingSerializer(many=True)},
        tags=["Viewings"],
    ),
    create=extend_schema(
        operation_id="schedule_viewing",
        summary="Schedule viewing",
        request=ViewingCreateSerializer,
        responses={201: ViewingSerializer},
        tags=["Viewings"],
    ),
)
class ViewingViewSet(viewsets.ViewSet):
    """
    Viewing endpoints.

    list:
        Viewings the current user booked, soonest first.

    create:
        Book a pending viewing of an active listing.

    property_viewings:
        Viewings of one listing, for its realtor.

    update_status:
        Approve, reject or complete a viewing.
    """

    permission_classes = [IsAuthenticated]

    def list(self, request):
        result = ViewingService.get_user_viewings(request.user)
        if not result.success:
            return failure_response(result)
        return Response(ViewingSerializer(result.data, many=True).data)

    def create(self, request):
        serializer = ViewingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = ViewingService.schedule_viewing(
            request.user,
            property_id=data["property_id"],
            scheduled_at=data["scheduled_at"],
            notes=data["notes"],
        )
        if not result.success:
            return failure_response(result)
        return Response(ViewingSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="list_property_viewings",
        summary="List viewings of a listing",
        responses={200: ViewingSerializer(many=True)},
        tags=["Viewings"],
    )
    @action(detail=False, methods=["get"], url_path=r"property/(?P<property_id>[^/.]+)")
    def property_viewings(self, request, property_id=None):
        result = ViewingService.get_property_viewings(request.user, property_id)
        if not result.success:
            return failure_response(result)
        return Response(ViewingSerializer(result.data, many=True).data)

    @extend_schema(
        operation_id="update_viewing_status",
        summary="Update viewing status",
        request=ViewingStatusSerializer,
        responses={200: ViewingSerializer},
        tags=["Viewings"],
    )
    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        serializer = ViewingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ViewingService.update_viewing_status(
            request.user, pk, serializer.validated_data["status"]
        )
        if not result.success:
            return failure_response(result)
        return Response(ViewingSerializer(result.data).data)
