"""
Chat application configuration.

This app provides property chat with:
- Threads between a customer and a realtor about one listing
- Immutable plain-text messages
- A realtime change feed of inserted messages
- Per-session chat panel state (open thread, unread count)
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

    def ready(self):
        """Connect the message change feed."""
        from chat import signals  # noqa: F401
