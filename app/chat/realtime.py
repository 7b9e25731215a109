"""
Realtime bridge between the message change feed and chat panels.

Two halves:

Publishing (sync, runs in the request that inserted the message):
    publish_message_inserted() sends the inserted row to the channel-layer
    groups of both thread participants. The feed is not filtered by
    thread; each panel decides what to do with an event.

Consuming (async, one per WebSocket session):
    MessageFeedBridge owns a bounded asyncio.Queue. Producers await
    publish(), which blocks while the queue is full. A background task
    started with start() drains the queue in order and hands each event
    to the session's handler (the chat panel).

Delivery is best-effort. Events published while a user has no open
session are not stored anywhere, and a reconnecting session does not
catch up on what it missed; it reloads the open thread instead.

Usage:
    bridge = MessageFeedBridge(handler=self.apply_inserted)
    bridge.start()
    await bridge.publish(event)
    await bridge.stop()
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings

from chat.constants import REALTIME_CONFIG
from chat.models import Thread

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from chat.models import Message

logger = logging.getLogger(__name__)


def user_group_name(user_id) -> str:
    """Channel-layer group that receives every message event for a user."""
    return f"{REALTIME_CONFIG.USER_GROUP_PREFIX}{user_id}"


def queue_size() -> int:
    return int(getattr(settings, "CHAT_REALTIME_QUEUE_SIZE", REALTIME_CONFIG.DEFAULT_QUEUE_SIZE))


def publish_message_inserted(message: Message) -> int:
    """
    Send an inserted message to both participants' groups.

    Args:
        message: The committed Message

    Returns:
        Number of groups the event was sent to (0 when nothing was sent)
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning("No channel layer configured; message events are not published")
        return 0

    participants = (
        Thread.objects.filter(pk=message.thread_id)
        .values_list("customer_id", "realtor_id")
        .first()
    )
    if participants is None:
        logger.warning(f"Thread {message.thread_id} vanished before message {message.id} was published")
        return 0

    event = {
        "type": REALTIME_CONFIG.MESSAGE_INSERTED_EVENT,
        "message": message.to_event(),
    }

    sent = 0
    for user_id in dict.fromkeys(participants):
        try:
            async_to_sync(channel_layer.group_send)(user_group_name(user_id), event)
            sent += 1
        except Exception:
            # Best-effort: a lost event is not retried
            logger.exception(
                f"Failed to publish message {message.id} to user {user_id}"
            )

    logger.debug(f"Published message {message.id} of thread {message.thread_id} to {sent} groups")
    return sent


class MessageFeedBridge:
    """
    Bounded hand-off from the change feed to one chat session.

    Attributes:
        queue: Pending events, at most ``maxsize`` of them
    """

    def __init__(
        self,
        handler: Callable[[dict], Awaitable[None]],
        maxsize: int | None = None,
    ):
        self.queue: asyncio.Queue[dict] = asyncio.Queue(maxsize=maxsize or queue_size())
        self._handler = handler
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start draining in a background task. Must run inside an event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._drain())
        logger.debug(f"Message feed bridge started (queue size {self.queue.maxsize})")

    async def publish(self, event: dict) -> None:
        """Enqueue an event, waiting while the queue is full."""
        await self.queue.put(event)

    async def stop(self) -> None:
        """
        Cancel the drain task.

        Events still queued are dropped; there is no replay.
        """
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        dropped = self.queue.qsize()
        if dropped:
            logger.info(f"Message feed bridge stopped with {dropped} undelivered events")
        else:
            logger.debug("Message feed bridge stopped")

    async def _drain(self) -> None:
        while True:
            event = await self.queue.get()
            try:
                await self._handler(event)
            except Exception:
                # One bad event must not stop the feed for the session
                logger.exception(f"Chat panel failed to handle event {event!r}")
            finally:
                self.queue.task_done()
