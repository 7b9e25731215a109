"""
Test configuration and fixtures for property tests.
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import CustomerFactory, RealtorFactory
from properties.models import PropertyStatus
from properties.tests.factories import PropertyFactory


@pytest.fixture
def realtor(db):
    return RealtorFactory(full_name="Rita Realtor")


@pytest.fixture
def customer(db):
    return CustomerFactory(full_name="Casey Customer")


@pytest.fixture
def listing(realtor):
    return PropertyFactory(realtor=realtor, title="Harbour loft", location="12 Quay Road")


@pytest.fixture
def pending_listing(realtor):
    return PropertyFactory(realtor=realtor, status=PropertyStatus.PENDING)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def customer_client(customer):
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


@pytest.fixture
def realtor_client(realtor):
    client = APIClient()
    client.force_authenticate(user=realtor)
    return client
