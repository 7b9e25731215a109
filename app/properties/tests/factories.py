"""
Factory Boy factories for property listings.

Usage:
    from properties.tests.factories import PropertyFactory

    listing = PropertyFactory()
    listing = PropertyFactory(realtor=realtor, title="Harbour loft")
"""

from decimal import Decimal

import factory

from authentication.tests.factories import RealtorFactory
from properties.models import Property, PropertyStatus


class PropertyFactory(factory.django.DjangoModelFactory):
    """
    Factory for Property model.

    Creates active listings owned by a new realtor by default.
    """

    class Meta:
        model = Property

    title = factory.Sequence(lambda n: f"Listing {n}")
    description = "Bright apartment close to the park."
    price = Decimal("350000.00")
    location = factory.Sequence(lambda n: f"{n} Harbour Street")
    city = "Lisbon"
    property_type = "apartment"
    status = PropertyStatus.ACTIVE
    bedrooms = 2
    bathrooms = 1
    area = "85 m2"
    features = factory.LazyFunction(lambda: ["balcony", "elevator"])
    images = factory.LazyFunction(list)
    realtor = factory.SubFactory(RealtorFactory)
