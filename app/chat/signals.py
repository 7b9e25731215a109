"""
Django signals for the chat app.

Every inserted Message is published on the change feed once the
surrounding transaction commits. Updates never reach the feed (messages
are immutable) and rolled-back inserts are never published.

Related files:
    - realtime.py: publish_message_inserted
    - apps.py: Signal registration
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from chat.models import Message
from chat.realtime import publish_message_inserted

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Message, dispatch_uid="chat_message_inserted")
def on_message_inserted(sender, instance, created, **kwargs):
    """Schedule publication of a newly inserted message."""
    if not created or kwargs.get("raw"):
        return

    transaction.on_commit(lambda: publish_message_inserted(instance))
