"""
WebSocket consumers for the chat application.

This module implements the WebSocket side of the chat panel: one
connection per UI session, holding that session's ChatPanel and
MessageFeedBridge.

Consumers:
    ChatPanelConsumer: Chat panel for one authenticated user

Authentication:
    Users are authenticated via JWT token passed as query parameter.
    JWTAuthMiddleware attaches the user to self.scope["user"].

Channel Groups:
    Each user has a channel group named "chat_user_{user_id}". Every
    message inserted into one of the user's threads is sent there and
    queued on the connection's MessageFeedBridge.

Message Types (from client):
    - open: Show the panel (resets unread, reloads the selected thread)
    - close: Hide the panel
    - select: Show a thread {thread_id}
    - open_chat: Force-open a thread {thread_id, property_title}
    - send: Send a message to the selected thread {body}

Message Types (to client):
    - panel: Panel state snapshot
    - messages: Messages of the selected thread
    - message: Message appended to the open thread
    - scroll: Scroll the open thread to its newest message
    - unread: Unread counter {count}
    - notification: New message in another thread (realtors only)
    - error: Error response {error, error_code}
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from core.exceptions import NOT_FOUND, VALIDATION_ERROR, BackendUnavailableError

from chat.constants import CLIENT_FRAMES, SERVER_FRAMES
from chat.panel import ChatPanel, OpenChatSignal, PanelMessage, Routing
from chat.realtime import MessageFeedBridge, user_group_name
from chat.services import MessageService, ThreadService
from chat.session import ChatSession

logger = logging.getLogger(__name__)


class ChatPanelConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer driving one chat panel.

    Handles:
        - Connection authentication
        - Joining/leaving the user's channel group
        - Panel actions (open, close, select, open_chat)
        - Sending messages to the selected thread
        - Routing change-feed events through the panel

    Attributes:
        session: ChatSession for the connected user
        panel: The connection's ChatPanel
        bridge: Queue between the channel layer and the panel
        group_name: Channel layer group name for the user
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.session: ChatSession | None = None
        self.panel: ChatPanel | None = None
        self.bridge: MessageFeedBridge | None = None
        self.group_name: str | None = None

    async def connect(self):
        """
        Handle WebSocket connection.

        Rejects unauthenticated users with close code 4001. On success,
        joins the user's group, starts the feed bridge and sends the
        initial panel snapshot.
        """
        self.session = ChatSession.from_user(self.scope.get("user"))

        if not self.session.is_authenticated:
            logger.warning("Rejected unauthenticated chat panel connection")
            await self.close(code=4001)
            return

        user = self.session.user
        self.panel = ChatPanel(viewer_id=user.pk, viewer_role=user.role)
        self.bridge = MessageFeedBridge(handler=self.route_inserted)
        self.group_name = user_group_name(user.pk)

        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        self.bridge.start()

        logger.info(f"User {user.pk} connected to chat panel")
        await self.send_panel()

    async def disconnect(self, close_code):
        """
        Handle WebSocket disconnection.

        Leaves the channel group and stops the bridge. Events not yet
        delivered are dropped.
        """
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
        if self.bridge is not None:
            await self.bridge.stop()
        if self.session is not None and self.session.is_authenticated:
            logger.info(f"User {self.session.user_id} disconnected from chat panel")

    async def receive_json(self, content, **kwargs):
        """
        Handle incoming WebSocket frames.

        Expected message format:
            {"type": "select", "thread_id": 12}
            {"type": "send", "body": "Is this still available?"}
        """
        if not isinstance(content, dict):
            await self.send_error("Invalid frame", VALIDATION_ERROR)
            return

        frame_type = content.get("type")
        handlers = {
            CLIENT_FRAMES.OPEN: self.handle_open,
            CLIENT_FRAMES.CLOSE: self.handle_close,
            CLIENT_FRAMES.SELECT: self.handle_select,
            CLIENT_FRAMES.OPEN_CHAT: self.handle_open_chat,
            CLIENT_FRAMES.SEND: self.handle_send,
        }
        handler = handlers.get(frame_type)
        if handler is None:
            await self.send_error(f"Unknown message type: {frame_type}", VALIDATION_ERROR)
            return

        try:
            await handler(content)
        except BackendUnavailableError as e:
            await self.send_error(e.message, e.error_code)

    async def handle_open(self, content):
        self.panel.open()
        await self.send_panel()
        await self.send_json({"type": SERVER_FRAMES.UNREAD, "count": self.panel.unread})
        if self.panel.thread_id is not None:
            # Picks up messages this session never received
            await self.load_thread(self.panel.thread_id, property_title=self.panel.property_title)

    async def handle_close(self, content):
        self.panel.close()
        await self.send_panel()

    async def handle_select(self, content):
        thread_id = content.get("thread_id")
        if thread_id is None:
            await self.send_error("thread_id is required", VALIDATION_ERROR)
            return
        await self.load_thread(thread_id)

    async def handle_open_chat(self, content):
        thread_id = content.get("thread_id")
        if thread_id is None:
            await self.send_error("thread_id is required", VALIDATION_ERROR)
            return
        try:
            signal = OpenChatSignal(
                thread_id=int(thread_id),
                property_title=content.get("property_title") or "",
            )
        except (TypeError, ValueError):
            await self.send_error("thread_id must be an integer", VALIDATION_ERROR)
            return

        self.panel.handle_open_chat(signal)
        await self.send_panel()
        await self.load_thread(signal.thread_id, property_title=signal.property_title or None)

    async def handle_send(self, content):
        if self.panel.thread_id is None:
            await self.send_error("Select a thread before sending", VALIDATION_ERROR)
            return

        result = await self._send_message(self.panel.thread_id, content.get("body"))
        if not result.success:
            await self.send_error(result.error, result.error_code)
        # The message itself arrives back through the change feed

    async def load_thread(self, thread_id, property_title: str | None = None):
        """Load a thread the user takes part in and show it in the panel."""
        thread_result = await self._get_thread(thread_id)
        if not thread_result.success:
            await self.send_error(thread_result.error, thread_result.error_code)
            return

        thread = thread_result.data
        if not thread.is_participant(self.session.user):
            # Same answer as a missing thread
            await self.send_error("Thread not found", NOT_FOUND)
            return

        messages_result = await self._list_messages(thread.pk)
        if not messages_result.success:
            await self.send_error(messages_result.error, messages_result.error_code)
            return

        if property_title is None:
            property_title = thread.property.title
        self.panel.select_thread(thread.pk, messages_result.data, property_title=property_title)
        await self.send_panel()
        await self.send_json(
            {
                "type": SERVER_FRAMES.MESSAGES,
                "thread_id": thread.pk,
                "messages": [m.to_dict() for m in self.panel.messages],
            }
        )
        await self.send_json({"type": SERVER_FRAMES.SCROLL, "thread_id": thread.pk})

    async def message_inserted(self, event):
        """Channel-layer handler for "message.inserted"; queues the row for the panel."""
        await self.bridge.publish(event["message"])

    async def route_inserted(self, row: dict):
        """Bridge handler: route one inserted message and tell the client."""
        outcome = self.panel.apply_inserted(row)

        if outcome.routing == Routing.APPENDED:
            message = await self._with_sender_name(outcome.message)
            await self.send_json({"type": SERVER_FRAMES.MESSAGE, "message": message.to_dict()})
            await self.send_json({"type": SERVER_FRAMES.SCROLL, "thread_id": message.thread_id})
        elif outcome.routing == Routing.UNREAD:
            await self.send_json({"type": SERVER_FRAMES.UNREAD, "count": outcome.unread})
            if outcome.notification is not None:
                await self.send_json({"type": SERVER_FRAMES.NOTIFICATION, **outcome.notification})

    async def send_panel(self):
        await self.send_json({"type": SERVER_FRAMES.PANEL, **self.panel.snapshot()})

    async def send_error(self, error: str, error_code: str | None):
        await self.send_json(
            {"type": SERVER_FRAMES.ERROR, "error": error, "error_code": error_code}
        )

    async def _with_sender_name(self, message: PanelMessage) -> PanelMessage:
        if not message.sender_name:
            message.sender_name = await self._display_name(message.sender_id)
        return message

    # =========================================================================
    # Database helpers
    # =========================================================================

    @database_sync_to_async
    def _get_thread(self, thread_id):
        return ThreadService.get_thread(self.session, thread_id)

    @database_sync_to_async
    def _list_messages(self, thread_id):
        return MessageService.list_messages(self.session, thread_id)

    @database_sync_to_async
    def _send_message(self, thread_id, body):
        return MessageService.send_message(
            self.session,
            thread_id=thread_id,
            sender_id=self.session.user_id,
            body=body,
        )

    @database_sync_to_async
    def _display_name(self, user_id) -> str:
        if user_id == self.session.user_id:
            return self.session.user.display_name

        from django.contrib.auth import get_user_model

        user = get_user_model().objects.filter(pk=user_id).first()
        return user.display_name if user is not None else ""
