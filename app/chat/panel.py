"""
Per-session chat panel bookkeeping.

ChatPanel is the view state of one UI session's chat panel: whether it is
open, which thread is shown, the messages on screen and the unread
counter. It is plain in-memory state; nothing here touches the database.
The WebSocket consumer owns one panel per connection and feeds it user
actions and change-feed events.

States:
    closed            Panel hidden
    open_no_thread    Panel visible, thread list only
    open_with_thread  Panel visible with one thread's messages

Routing of an inserted message (apply_inserted):
    - Thread is the selected thread: append it once (deduplicated by
      message id) and ask the client to scroll to the end. This holds
      while the panel is closed too, since close() keeps the selection.
    - Any other thread: unread count + 1, plus a "new message" notification
      when the viewer is a realtor. The visible list is left alone.

Known gap: select_thread() always applies, even when the user has moved
to another thread while the messages were loading.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass, field

from chat.constants import MESSAGE_CONFIG

logger = logging.getLogger(__name__)


class PanelState(str, enum.Enum):
    CLOSED = "closed"
    OPEN_NO_THREAD = "open_no_thread"
    OPEN_WITH_THREAD = "open_with_thread"


class Routing(str, enum.Enum):
    """What apply_inserted() did with an event."""

    APPENDED = "appended"
    DUPLICATE = "duplicate"
    UNREAD = "unread"


@dataclass(frozen=True)
class OpenChatSignal:
    """Request from elsewhere in the UI to show a thread (e.g. "chat with realtor")."""

    thread_id: int
    property_title: str = ""


@dataclass
class PanelMessage:
    """A message as displayed in the panel."""

    id: int
    thread_id: int
    sender_id: int
    body: str
    created_at: str | None = None
    sender_name: str = ""

    @classmethod
    def from_event(cls, event: dict) -> PanelMessage:
        return cls(
            id=int(event["id"]),
            thread_id=int(event["thread_id"]),
            sender_id=int(event["sender_id"]),
            body=event.get("body", ""),
            created_at=event.get("created_at"),
            sender_name=event.get("sender_name", ""),
        )

    @classmethod
    def from_model(cls, message) -> PanelMessage:
        sender = getattr(message, "sender", None)
        return cls(
            id=message.pk,
            thread_id=message.thread_id,
            sender_id=message.sender_id,
            body=message.body,
            created_at=message.created_at.isoformat() if message.created_at else None,
            sender_name=sender.display_name if sender is not None else "",
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RoutingOutcome:
    """
    Result of routing one inserted message.

    Attributes:
        routing: What happened to the event
        message: The message when it was appended
        scroll: Client should scroll to the newest message
        unread: Unread count after routing
        notification: "New message" notification for realtors, else None
    """

    routing: Routing
    message: PanelMessage | None = None
    scroll: bool = False
    unread: int = 0
    notification: dict | None = None


@dataclass
class ChatPanel:
    """
    Chat panel state for one viewer.

    Attributes:
        viewer_id: Id of the user looking at the panel
        viewer_role: Marketplace role of the viewer
        is_open: Whether the panel is visible
        thread_id: Selected thread, if any
        property_title: Title shown in the panel header
        messages: Messages of the selected thread, in send order
        unread: Messages received in other threads since the panel was opened
    """

    viewer_id: int
    viewer_role: str = ""
    is_open: bool = False
    thread_id: int | None = None
    property_title: str = ""
    messages: list[PanelMessage] = field(default_factory=list)
    unread: int = 0
    _message_ids: set[int] = field(default_factory=set, repr=False)

    @property
    def state(self) -> PanelState:
        if not self.is_open:
            return PanelState.CLOSED
        if self.thread_id is None:
            return PanelState.OPEN_NO_THREAD
        return PanelState.OPEN_WITH_THREAD

    def open(self) -> None:
        """Show the panel and reset the unread counter."""
        self.is_open = True
        self.unread = 0

    def close(self) -> None:
        """Hide the panel. The selected thread is kept for the next open."""
        self.is_open = False

    def toggle(self) -> None:
        if self.is_open:
            self.close()
        else:
            self.open()

    def select_thread(self, thread_id: int, messages, property_title: str | None = None) -> None:
        """
        Show a thread with its loaded messages.

        ``messages`` may be Message instances or PanelMessage objects. Opens
        the panel if it was closed.
        """
        if not self.is_open:
            self.open()
        self.thread_id = int(thread_id)
        if property_title is not None:
            self.property_title = property_title

        loaded = [m if isinstance(m, PanelMessage) else PanelMessage.from_model(m) for m in messages]
        self.messages = []
        self._message_ids = set()
        for message in loaded:
            self._append(message)

    def handle_open_chat(self, signal: OpenChatSignal) -> int:
        """
        Force-open the panel on the thread named by an open-chat signal.

        The message list is cleared until the caller loads the thread and
        calls select_thread().

        Returns:
            The thread id to load
        """
        self.open()
        self.thread_id = int(signal.thread_id)
        self.property_title = signal.property_title
        self.messages = []
        self._message_ids = set()
        return self.thread_id

    def apply_inserted(self, event: dict) -> RoutingOutcome:
        """Route one inserted-message event from the change feed."""
        message = PanelMessage.from_event(event)

        if self.thread_id is not None and message.thread_id == self.thread_id:
            if message.id in self._message_ids:
                return RoutingOutcome(Routing.DUPLICATE, unread=self.unread)
            self._append(message)
            return RoutingOutcome(Routing.APPENDED, message=message, scroll=True, unread=self.unread)

        self.unread += 1
        notification = None
        if self.viewer_role == "realtor":
            notification = {
                "title": "New message",
                "thread_id": message.thread_id,
                "sender_id": message.sender_id,
                "body": message.body[: MESSAGE_CONFIG.PREVIEW_LENGTH],
            }
            logger.info(
                f"New message notification for realtor {self.viewer_id} "
                f"in thread {message.thread_id}"
            )
        return RoutingOutcome(Routing.UNREAD, unread=self.unread, notification=notification)

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "thread_id": self.thread_id,
            "property_title": self.property_title,
            "unread": self.unread,
        }

    def _append(self, message: PanelMessage) -> None:
        if message.id in self._message_ids:
            return
        self._message_ids.add(message.id)
        self.messages.append(message)
