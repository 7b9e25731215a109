"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ThreadViewSet: Thread list, find-or-create, detail, archive and messages

URL Structure:
    /api/v1/chat/threads/                  GET, POST
    /api/v1/chat/threads/{id}/             GET
    /api/v1/chat/threads/{id}/archive/     POST
    /api/v1/chat/threads/{id}/messages/    GET, POST

Design Decisions:
    - Every request builds a ChatSession from request.user and passes it
      to the service layer
    - Service failures map to HTTP status by error code
      (VALIDATION_ERROR 400, UNAUTHENTICATED 401, NOT_FOUND 404)
    - BackendUnavailableError is rendered as 503 by core.views.api_exception_handler
    - Non-participants get 403 on existing threads
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.views import failure_response

from chat.permissions import IsThreadParticipant
from chat.serializers import (
    MessageCreateSerializer,
    MessageSerializer,
    ThreadCreateSerializer,
    ThreadSerializer,
    ThreadSummarySerializer,
)
from chat.services import MessageService, ThreadService
from chat.session import ChatSession


@extend_schema_view(
    list=extend_schema(
        operation_id="list_threads",
        summary="List threads",
        responses={200: ThreadSummarySerializer(many=True)},
        tags=["Chat - Threads"],
    ),
    create=extend_schema(
        operation_id="find_or_create_thread",
        summary="Find or create thread",
        request=ThreadCreateSerializer,
        responses={
            200: ThreadSummarySerializer,
            201: ThreadSummarySerializer,
            404: OpenApiResponse(description="Property or realtor not found"),
        },
        tags=["Chat - Threads"],
    ),
    retrieve=extend_schema(
        operation_id="get_thread",
        summary="Get thread",
        responses={200: ThreadSerializer},
        tags=["Chat - Threads"],
    ),
)
class ThreadViewSet(viewsets.ViewSet):
    """
    ViewSet for thread operations.

    list:
        Threads of the current user, newest activity first. Realtors see
        threads where they answer, customers threads they opened, other
        roles both.

    create:
        Find or create the active thread between the current user (as
        customer) and a listing's realtor. Returns 201 when a thread was
        created, 200 when an existing one was reused.

    retrieve:
        Thread detail with both participants.

    archive:
        Archive the thread. A missing thread answers 204.

    messages:
        GET lists all messages oldest first; POST sends one.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"[0-9]+"

    def get_session(self) -> ChatSession:
        return ChatSession.from_user(self.request.user)

    def get_participant_thread(self, pk):
        """
        Load a thread and check the participant permission.

        Returns:
            (thread, None) or (None, error Response)
        """
        result = ThreadService.get_thread(self.get_session(), pk)
        if not result.success:
            return None, failure_response(result)
        self.check_object_permissions(self.request, result.data)
        return result.data, None

    def list(self, request):
        """List threads for the current user."""
        session = self.get_session()
        result = ThreadService.list_threads_for_user(session, session.user_id, session.role)
        if not result.success:
            return failure_response(result)
        return Response(ThreadSummarySerializer(result.data, many=True).data)

    def create(self, request):
        """Find or create a thread about a listing."""
        serializer = ThreadCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        session = self.get_session()
        if "realtor_id" in data:
            result = ThreadService.find_or_create_thread(
                session,
                property_id=data["property_id"],
                customer_id=session.user_id,
                realtor_id=data["realtor_id"],
            )
        else:
            result = ThreadService.start_thread_for_property(session, data["property_id"])

        if not result.success:
            return failure_response(result)

        status_code = status.HTTP_201_CREATED if result.data.created else status.HTTP_200_OK
        return Response(ThreadSummarySerializer(result.data).data, status=status_code)

    def get_permissions(self):
        """Return permissions based on action."""
        if self.action in ("retrieve", "archive", "messages"):
            return [IsAuthenticated(), IsThreadParticipant()]
        return [IsAuthenticated()]

    def retrieve(self, request, pk=None):
        """Get a thread the user takes part in."""
        thread, error = self.get_participant_thread(pk)
        if error is not None:
            return error
        return Response(ThreadSerializer(thread).data)

    @extend_schema(
        operation_id="archive_thread",
        summary="Archive thread",
        request=None,
        responses={200: ThreadSerializer, 204: None},
        tags=["Chat - Threads"],
    )
    @action(detail=True, methods=["post"])
    def archive(self, request, pk=None):
        """Archive a thread; archiving a missing thread is a no-op."""
        session = self.get_session()

        lookup = ThreadService.get_thread(session, pk)
        if lookup.success:
            self.check_object_permissions(request, lookup.data)

        result = ThreadService.archive_thread(session, pk)
        if not result.success:
            return failure_response(result)
        if result.data is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(ThreadSerializer(result.data).data)

    @extend_schema(
        methods=["GET"],
        operation_id="list_thread_messages",
        summary="List messages",
        responses={200: MessageSerializer(many=True)},
        tags=["Chat - Messages"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="send_thread_message",
        summary="Send message",
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        """List or send messages in a thread."""
        thread, error = self.get_participant_thread(pk)
        if error is not None:
            return error

        session = self.get_session()
        if request.method == "GET":
            result = MessageService.list_messages(session, thread.pk)
            if not result.success:
                return failure_response(result)
            return Response(MessageSerializer(result.data, many=True).data)

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.send_message(
            session,
            thread_id=thread.pk,
            sender_id=session.user_id,
            body=serializer.validated_data["body"],
        )
        if not result.success:
            return failure_response(result)

        message = result.data
        message.sender = request.user
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)
