"""
Explicit session passed to every chat operation.

Chat services never read the current user from ambient state. Callers
(REST views, the WebSocket consumer, tests) build a ChatSession from
whatever authenticated the request and pass it in.

Usage:
    from chat.session import ChatSession

    session = ChatSession.from_user(request.user)
    result = ThreadService.list_threads_for_user(session, session.user.id, session.role)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from authentication.models import User


@dataclass(frozen=True)
class ChatSession:
    """
    The authenticated user behind a chat operation.

    Attributes:
        user: Authenticated user, or None for an anonymous session
    """

    user: User | None = None

    @classmethod
    def from_user(cls, user) -> ChatSession:
        """Build a session, treating AnonymousUser and inactive users as no user."""
        if user is None or not getattr(user, "is_authenticated", False):
            return cls(user=None)
        if not user.is_active:
            return cls(user=None)
        return cls(user=user)

    @classmethod
    def anonymous(cls) -> ChatSession:
        return cls(user=None)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> int | None:
        return self.user.pk if self.user is not None else None

    @property
    def role(self) -> str | None:
        return self.user.role if self.user is not None else None
