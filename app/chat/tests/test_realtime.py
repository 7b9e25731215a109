"""
Tests for publishing inserted messages to the channel layer.

The channel layer is replaced by a mock so the tests can assert on the
exact group_send calls.
"""

from unittest import mock

import pytest

from chat.models import Thread
from chat.realtime import publish_message_inserted, user_group_name
from chat.services import MessageService
from chat.tests.factories import MessageFactory


@pytest.fixture
def channel_layer():
    layer = mock.Mock()
    layer.group_send = mock.AsyncMock()
    with mock.patch("chat.realtime.get_channel_layer", return_value=layer):
        yield layer


def _sent_groups(layer):
    return [call.args[0] for call in layer.group_send.await_args_list]


class TestUserGroupName:
    def test_group_per_user(self):
        assert user_group_name(42) == "chat_user_42"


class TestPublishMessageInserted:
    """
    Tests for publish_message_inserted().

    Verifies:
    - Both participants' groups get the event
    - Event carries the inserted row
    - Failures are logged, not raised
    """

    def test_sends_to_both_participants(self, thread, customer, realtor, channel_layer):
        message = MessageFactory(thread=thread, sender=customer)

        sent = publish_message_inserted(message)

        assert sent == 2
        assert _sent_groups(channel_layer) == [
            user_group_name(customer.id),
            user_group_name(realtor.id),
        ]

    def test_event_payload(self, thread, customer, channel_layer):
        message = MessageFactory(thread=thread, sender=customer, body="Hello")

        publish_message_inserted(message)

        event = channel_layer.group_send.await_args_list[0].args[1]
        assert event["type"] == "message.inserted"
        assert event["message"] == message.to_event()

    def test_no_channel_layer(self, thread):
        message = MessageFactory(thread=thread)

        with mock.patch("chat.realtime.get_channel_layer", return_value=None):
            assert publish_message_inserted(message) == 0

    def test_missing_thread_sends_nothing(self, thread, channel_layer):
        message = MessageFactory(thread=thread)
        Thread.objects.filter(pk=thread.pk).delete()

        assert publish_message_inserted(message) == 0
        channel_layer.group_send.assert_not_awaited()

    def test_group_send_failure_is_swallowed(self, thread, channel_layer):
        channel_layer.group_send.side_effect = [ConnectionError("redis down"), None]
        message = MessageFactory(thread=thread)

        sent = publish_message_inserted(message)

        assert sent == 1


class TestMessageInsertedSignal:
    """Tests for the post_save hook that feeds the channel layer."""

    def test_published_after_commit(
        self, thread, customer, customer_session, channel_layer, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            result = MessageService.send_message(customer_session, thread.id, customer.id, "Hello")

        assert result.success
        assert len(callbacks) == 1
        assert channel_layer.group_send.await_count == 2

    def test_not_published_without_commit(self, thread, customer, customer_session, channel_layer):
        MessageService.send_message(customer_session, thread.id, customer.id, "Hello")

        # The test transaction never commits
        channel_layer.group_send.assert_not_awaited()

    def test_thread_update_is_not_published(
        self, thread, channel_layer, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            thread.save()

        assert callbacks == []
        channel_layer.group_send.assert_not_awaited()
