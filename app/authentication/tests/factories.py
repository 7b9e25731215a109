"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory, RealtorFactory

    customer = UserFactory()
    realtor = RealtorFactory(full_name="Rita Realtor")
"""

import factory

from authentication.models import User, UserRole


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active customers by default.

    Examples:
        user = UserFactory()
        advisor = UserFactory(role=UserRole.ADVISOR)
        inactive = UserFactory(is_active=False)
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    full_name = ""
    role = UserRole.CUSTOMER
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class CustomerFactory(UserFactory):
    """Customer browsing listings."""

    email = factory.Sequence(lambda n: f"customer{n}@example.com")
    role = UserRole.CUSTOMER


class RealtorFactory(UserFactory):
    """Realtor owning listings."""

    email = factory.Sequence(lambda n: f"realtor{n}@example.com")
    full_name = factory.Sequence(lambda n: f"Realtor {n}")
    role = UserRole.REALTOR
