"""
Authentication views.

This module provides API views for:
- JWT login and refresh (djangorestframework-simplejwt)
- The current user's identity and role

Related files:
    - serializers.py: Response serialization
    - urls.py: URL routing

Note:
    Chat clients obtain an access token from /api/v1/auth/token/ and pass
    it to the WebSocket endpoint as ?token=<access>.
"""

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import UserSerializer


class CurrentUserView(APIView):
    """Return the authenticated user, including the marketplace role."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_current_user",
        summary="Get current user",
        responses={200: UserSerializer},
        tags=["Auth - User"],
    )
    def get(self, request):
        """Get the current user's identity."""
        return Response(UserSerializer(request.user).data)
