"""
Test configuration and fixtures for viewing tests.
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from authentication.tests.factories import CustomerFactory, RealtorFactory
from properties.tests.factories import PropertyFactory
from viewings.tests.factories import ViewingFactory


@pytest.fixture
def realtor(db):
    return RealtorFactory(full_name="Rita Realtor")


@pytest.fixture
def other_realtor(db):
    return RealtorFactory(full_name="Rob Realtor")


@pytest.fixture
def customer(db):
    return CustomerFactory(full_name="Casey Customer")


@pytest.fixture
def listing(realtor):
    return PropertyFactory(realtor=realtor, title="Harbour loft", location="12 Quay Road")


@pytest.fixture
def viewing(listing, customer):
    return ViewingFactory(property=listing, customer=customer)


@pytest.fixture
def next_week():
    return timezone.now() + timedelta(days=7)


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


@pytest.fixture
def other_realtor_client(other_realtor):
    client = APIClient()
    client.force_authenticate(user=other_realtor)
    return client
