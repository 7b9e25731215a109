"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Message content limits
- Realtime delivery (channel-layer groups, event types, queue sizing)
- WebSocket frame types exchanged with the chat panel

Import example:
    from chat.constants import MESSAGE_CONFIG, REALTIME_CONFIG
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits (applied to the trimmed body)
    MAX_BODY_LENGTH: Final[int] = 10000  # Characters
    MIN_BODY_LENGTH: Final[int] = 1

    # Characters of the latest message shown in thread lists
    PREVIEW_LENGTH: Final[int] = 100


# =============================================================================
# Realtime Configuration
# =============================================================================


class REALTIME_CONFIG:
    """
    Configuration for the message change feed.

    Every user has one channel-layer group; inserted messages are sent to the
    groups of both thread participants.
    """

    USER_GROUP_PREFIX: Final[str] = "chat_user_"

    # Channel-layer event type, dispatched to ChatPanelConsumer.message_inserted
    MESSAGE_INSERTED_EVENT: Final[str] = "message.inserted"

    # Fallback when settings.CHAT_REALTIME_QUEUE_SIZE is absent
    DEFAULT_QUEUE_SIZE: Final[int] = 100


# =============================================================================
# WebSocket Frames
# =============================================================================


class CLIENT_FRAMES:
    """Frame types accepted from the browser."""

    OPEN: Final[str] = "open"
    CLOSE: Final[str] = "close"
    SELECT: Final[str] = "select"
    OPEN_CHAT: Final[str] = "open_chat"
    SEND: Final[str] = "send"


class SERVER_FRAMES:
    """Frame types sent to the browser."""

    PANEL: Final[str] = "panel"
    MESSAGES: Final[str] = "messages"
    MESSAGE: Final[str] = "message"
    SCROLL: Final[str] = "scroll"
    UNREAD: Final[str] = "unread"
    NOTIFICATION: Final[str] = "notification"
    ERROR: Final[str] = "error"
