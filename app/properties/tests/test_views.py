"""
Tests for property listing endpoints.
"""

import uuid

from chat.models import Thread
from properties.tests.factories import PropertyFactory

PROPERTIES_URL = "/api/v1/properties/"


class TestPropertyList:
    """Tests for GET /properties/."""

    def test_public(self, api_client, listing, pending_listing):
        response = api_client.get(PROPERTIES_URL)

        assert response.status_code == 200
        assert [item["id"] for item in response.data["results"]] == [str(listing.id)]

    def test_realtor_filter(self, api_client, listing):
        response = api_client.get(PROPERTIES_URL, {"realtor": listing.realtor_id})

        assert response.data["count"] == 1

    def test_invalid_realtor_filter(self, api_client, db):
        response = api_client.get(PROPERTIES_URL, {"realtor": "abc"})

        assert response.status_code == 400
        assert "realtor" in response.data

    def test_city_filter_ignores_case(self, api_client, listing):
        PropertyFactory(city="Porto")

        response = api_client.get(PROPERTIES_URL, {"city": "lisbon"})

        assert [item["id"] for item in response.data["results"]] == [str(listing.id)]

    def test_featured_filter(self, api_client, listing):
        featured = PropertyFactory(is_featured=True)

        response = api_client.get(PROPERTIES_URL, {"is_featured": "true"})

        assert [item["id"] for item in response.data["results"]] == [str(featured.id)]

    def test_filters_do_not_reveal_pending(self, api_client, pending_listing):
        response = api_client.get(PROPERTIES_URL, {"realtor": pending_listing.realtor_id})

        assert response.data["count"] == 0


class TestPropertyDetail:
    """Tests for GET /properties/{id}/."""

    def test_includes_realtor(self, api_client, listing, realtor):
        response = api_client.get(f"{PROPERTIES_URL}{listing.id}/")

        assert response.status_code == 200
        assert response.data["realtor"]["id"] == realtor.id

    def test_pending_hidden_from_customer(self, customer_client, pending_listing):
        response = customer_client.get(f"{PROPERTIES_URL}{pending_listing.id}/")

        assert response.status_code == 404

    def test_unknown(self, api_client, db):
        response = api_client.get(f"{PROPERTIES_URL}{uuid.uuid4()}/")

        assert response.status_code == 404


class TestPropertyChat:
    """Tests for POST /properties/{id}/chat/."""

    def test_creates_then_reuses(self, customer_client, listing):
        first = customer_client.post(f"{PROPERTIES_URL}{listing.id}/chat/")
        second = customer_client.post(f"{PROPERTIES_URL}{listing.id}/chat/")

        assert first.status_code == 201
        assert second.status_code == 200
        assert Thread.objects.count() == 1

    def test_requires_authentication(self, api_client, listing):
        response = api_client.post(f"{PROPERTIES_URL}{listing.id}/chat/")

        assert response.status_code == 401
