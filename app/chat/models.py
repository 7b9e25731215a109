"""
Chat system models.

This module defines the data models for property chat:
- One thread per (property, customer, realtor) conversation
- Plain-text messages inside a thread

Models:
    Thread: Conversation between a customer and a realtor about a listing
    Message: Immutable message within a thread

Design Decisions:
    - Thread uniqueness is maintained by ThreadService.find_or_create_thread
      only. There is no unique constraint, so concurrent creators can race
      and leave duplicate active threads; lookups return the newest one.
    - Thread.updated_at doubles as the last-activity timestamp. Sending a
      message touches it, which drives "newest activity first" ordering.
    - Messages have no edit or delete path. created_at is assigned by the
      database layer at insert time and (created_at, id) is the total order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models

from core.models import BaseModel

if TYPE_CHECKING:
    from authentication.models import User


class ThreadStatus(models.TextChoices):
    """
    Lifecycle of a thread.

    ACTIVE: Visible and reused by find-or-create
    ARCHIVED: Hidden from find-or-create; a new active thread is created instead
    """

    ACTIVE = "active", "Active"
    ARCHIVED = "archived", "Archived"


class Thread(BaseModel):
    """
    Conversation between a customer and a realtor about one property.

    Fields:
        property: The listing being discussed
        customer: The enquiring user (stored in the ``user_id`` column)
        realtor: The listing's realtor
        status: Active or archived

    Timestamps:
        created_at: When the thread was opened
        updated_at: Last activity (thread created, message sent, archived)
    """

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="chat_threads",
        help_text="Listing this thread is about",
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        db_column="user_id",
        related_name="customer_threads",
        help_text="Customer who opened the thread",
    )
    realtor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="realtor_threads",
        help_text="Realtor answering the thread",
    )
    status = models.CharField(
        max_length=10,
        choices=ThreadStatus.choices,
        default=ThreadStatus.ACTIVE,
        db_index=True,
    )

    class Meta:
        db_table = "threads"
        ordering = ["-updated_at", "-id"]
        indexes = [
            models.Index(
                fields=["property", "customer", "realtor", "status"],
                name="thread_lookup_idx",
            ),
            models.Index(fields=["customer", "-updated_at"], name="thread_customer_idx"),
            models.Index(fields=["realtor", "-updated_at"], name="thread_realtor_idx"),
        ]

    def __str__(self) -> str:
        return f"Thread {self.pk} ({self.status})"

    def participant_ids(self) -> tuple[int, int]:
        """(customer_id, realtor_id)."""
        return (self.customer_id, self.realtor_id)

    def is_participant(self, user: User) -> bool:
        """Check whether ``user`` is the customer or the realtor of this thread."""
        return user is not None and user.pk in self.participant_ids()

    def counterpart_id(self, user_id: int) -> int:
        """The other side of the conversation from ``user_id``'s point of view."""
        return self.realtor_id if user_id == self.customer_id else self.customer_id


class Message(models.Model):
    """
    A message within a thread.

    Fields:
        thread: Parent thread
        sender: Author (customer or realtor)
        body: Trimmed, non-empty text
        created_at: Insert time, assigned automatically

    Messages are immutable; saving an existing message raises ValueError.
    """

    thread = models.ForeignKey(
        Thread,
        on_delete=models.CASCADE,
        related_name="messages",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    body = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "messages"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["thread", "created_at", "id"], name="message_thread_idx"),
        ]

    def __str__(self) -> str:
        preview = self.body[:50] + "..." if len(self.body) > 50 else self.body
        return f"{self.sender_id}: {preview}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ValueError("Messages are immutable once sent")
        super().save(*args, **kwargs)

    def to_event(self) -> dict:
        """Row payload published on the change feed."""
        return {
            "id": self.pk,
            "thread_id": self.thread_id,
            "sender_id": self.sender_id,
            "body": self.body,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
