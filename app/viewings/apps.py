"""
Viewings application configuration.
"""

from django.apps import AppConfig


class ViewingsConfig(AppConfig):
    """Configuration for the viewings application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "viewings"
    verbose_name = "Viewings"
