"""
Test configuration and fixtures for chat tests.

This module provides:
- Customer, realtor and outsider users
- A listing and an active thread between the customer and the listing's realtor
- ChatSession objects for each user
- API clients authenticated as each user

Usage:
    def test_example(thread, customer_client):
        response = customer_client.get(f"/api/v1/chat/threads/{thread.id}/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from authentication.models import UserRole
from authentication.tests.factories import CustomerFactory, RealtorFactory, UserFactory
from chat.session import ChatSession
from chat.tests.factories import ThreadFactory
from properties.tests.factories import PropertyFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def realtor(db):
    """Realtor who owns the listing."""
    return RealtorFactory(full_name="Rita Realtor")


@pytest.fixture
def customer(db):
    """Customer enquiring about the listing."""
    return CustomerFactory(full_name="Casey Customer")


@pytest.fixture
def outsider(db):
    """Customer who takes no part in the test thread."""
    return CustomerFactory(full_name="Olly Outsider")


@pytest.fixture
def advisor(db):
    return UserFactory(role=UserRole.ADVISOR, full_name="Ada Advisor")


# =============================================================================
# Listing / Thread Fixtures
# =============================================================================


@pytest.fixture
def listing(realtor):
    """Active listing owned by ``realtor``."""
    return PropertyFactory(realtor=realtor, title="Harbour loft", location="12 Quay Road")


@pytest.fixture
def thread(listing, customer, realtor):
    """Active thread between ``customer`` and ``realtor`` about ``listing``."""
    return ThreadFactory(property=listing, customer=customer, realtor=realtor)


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def customer_session(customer):
    return ChatSession.from_user(customer)


@pytest.fixture
def realtor_session(realtor):
    return ChatSession.from_user(realtor)


@pytest.fixture
def anonymous_session():
    return ChatSession.anonymous()


# =============================================================================
# API Client Fixtures
# =============================================================================


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def customer_client(customer):
    return _client_for(customer)


@pytest.fixture
def realtor_client(realtor):
    return _client_for(realtor)


@pytest.fixture
def outsider_client(outsider):
    return _client_for(outsider)


@pytest.fixture
def access_token():
    """Build a JWT access token string for a user."""

    def _token(user):
        return str(AccessToken.for_user(user))

    return _token
