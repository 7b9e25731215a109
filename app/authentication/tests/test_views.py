"""
Tests for authentication API views.

Covers JWT token issuance and the current-user endpoint used by chat
clients to learn their role.
"""

from rest_framework import status

from authentication.models import UserRole
from authentication.tests.factories import RealtorFactory

TOKEN_URL = "/api/v1/auth/token/"
ME_URL = "/api/v1/auth/me/"


class TestTokenObtain:
    def test_valid_credentials_return_token_pair(self, api_client, user):
        response = api_client.post(
            TOKEN_URL,
            {"email": user.email, "password": "TestPass123!"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
        assert "refresh" in response.data

    def test_wrong_password_is_rejected(self, api_client, user):
        response = api_client.post(
            TOKEN_URL,
            {"email": user.email, "password": "wrong"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestCurrentUser:
    def test_returns_role_and_display_name(self, api_client, db):
        realtor = RealtorFactory(full_name="Rita Realtor")
        api_client.force_authenticate(user=realtor)

        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["role"] == UserRole.REALTOR
        assert response.data["display_name"] == "Rita Realtor"

    def test_requires_authentication(self, api_client, db):
        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
