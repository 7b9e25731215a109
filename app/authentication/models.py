"""
Authentication models.

This module defines the marketplace user:
- User: Email-identified account carrying a marketplace role

Roles:
    customer: Browses listings and contacts realtors
    realtor:  Owns listings and answers customer threads
    advisor:  Offers paid consultations
    admin:    Operates the marketplace

Related files:
    - managers.py: Custom user manager for email-based creation
    - serializers.py: Public user representation

Security:
    - User passwords hashed with Django's password hashers
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class UserRole(models.TextChoices):
    """Marketplace role of a user account."""

    CUSTOMER = "customer", "Customer"
    REALTOR = "realtor", "Realtor"
    ADVISOR = "advisor", "Advisor"
    ADMIN = "admin", "Admin"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        full_name: Optional display name
        role: Marketplace role (drives dashboards and chat listing)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        realtor = User.objects.create_user(
            email='agent@example.com',
            password='securepassword',
            role=UserRole.REALTOR,
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    full_name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Display name shown to chat counterparts",
    )

    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.CUSTOMER,
        db_index=True,
        help_text="Marketplace role",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    def get_full_name(self):
        """Return the display name, falling back to the email address."""
        return self.full_name or self.email

    def get_short_name(self):
        """Return the first word of the name, or the email local part."""
        if self.full_name:
            return self.full_name.split()[0]
        return self.email.split("@")[0]

    @property
    def display_name(self) -> str:
        """Identity shown to the other side of a chat thread."""
        return self.get_full_name()

    @property
    def is_realtor(self) -> bool:
        """Check if the user lists properties and answers threads."""
        return self.role == UserRole.REALTOR

    @property
    def is_customer(self) -> bool:
        """Check if the user is a customer."""
        return self.role == UserRole.CUSTOMER
