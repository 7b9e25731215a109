"""
Permission classes for chat API.

This module provides DRF permission classes for the chat system:
- IsThreadParticipant: User is the thread's customer or realtor

Design Decisions:
    - Staff users are not granted implicit access; admins use the Django admin
    - Missing threads are answered by the view (404 or archive no-op)
      before object permissions run
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from chat.models import Message, Thread

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsThreadParticipant(permissions.BasePermission):
    """
    Allows access only to the two participants of a thread.

    Accepts Thread objects and Message objects (checked via their thread).
    """

    message = "You are not a participant in this thread."

    def has_object_permission(
        self, request: Request, view: APIView, obj: Thread | Message
    ) -> bool:
        """Check if user is the customer or the realtor."""
        if not request.user.is_authenticated:
            return False

        thread = obj.thread if isinstance(obj, Message) else obj
        return thread.is_participant(request.user)
