"""
Tests for chat service layer business logic.

This module tests the chat data accessor:
- ThreadService: find-or-create, start from a listing, list, get, archive
- MessageService: list and send

Test Organization:
    - Each service method has its own test class
    - Each test validates ONE specific behavior
    - Tests use descriptive names following: test_<scenario>_<expected_outcome>

Testing Philosophy:
    Tests focus on observable behavior, not implementation details:
    - ServiceResult success/failure states and error codes
    - Database state changes
"""

import uuid
from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError
from django.utils import timezone

from authentication.tests.factories import CustomerFactory, RealtorFactory
from chat.constants import MESSAGE_CONFIG
from chat.models import Message, Thread, ThreadStatus
from chat.services import MessageService, ThreadService
from chat.session import ChatSession
from chat.tests.factories import MessageFactory, ThreadFactory
from core.exceptions import BackendUnavailableError
from properties.tests.factories import PropertyFactory


# =============================================================================
# TestFindOrCreateThread
# =============================================================================


class TestFindOrCreateThread:
    """
    Tests for ThreadService.find_or_create_thread().

    Verifies:
    - Lazy creation on first contact
    - Reuse of the active thread for the same triple
    - Archived threads are not reused
    - Missing property/participants create nothing
    """

    def test_creates_active_thread_on_first_contact(self, customer_session, listing, customer, realtor):
        """
        First contact for a (property, customer, realtor) triple creates a thread.

        Why it matters: threads are created lazily by "chat with realtor".
        """
        result = ThreadService.find_or_create_thread(
            customer_session, listing.id, customer.id, realtor.id
        )

        assert result.success is True
        assert result.data.created is True
        assert result.data.status == ThreadStatus.ACTIVE
        assert result.data.property_title == "Harbour loft"
        assert result.data.property_location == "12 Quay Road"
        assert Thread.objects.filter(
            property=listing, customer=customer, realtor=realtor
        ).count() == 1

    def test_returns_existing_active_thread(self, customer_session, thread, listing, customer, realtor):
        """Second call for the same triple returns the same thread."""
        result = ThreadService.find_or_create_thread(
            customer_session, listing.id, customer.id, realtor.id
        )

        assert result.success is True
        assert result.data.created is False
        assert result.data.id == thread.id
        assert Thread.objects.count() == 1

    def test_counterpart_is_realtor_for_customer(self, customer_session, listing, customer, realtor):
        result = ThreadService.find_or_create_thread(
            customer_session, listing.id, customer.id, realtor.id
        )

        assert result.data.counterpart_id == realtor.id
        assert result.data.counterpart_name == "Rita Realtor"

    def test_archived_thread_is_not_reused(self, customer_session, thread, listing, customer, realtor):
        """
        Archived threads are ignored; a fresh active thread is created.

        Why it matters: the invariant is one ACTIVE thread per triple.
        """
        thread.status = ThreadStatus.ARCHIVED
        thread.save()

        result = ThreadService.find_or_create_thread(
            customer_session, listing.id, customer.id, realtor.id
        )

        assert result.data.created is True
        assert result.data.id != thread.id
        assert Thread.objects.filter(status=ThreadStatus.ACTIVE).count() == 1

    def test_duplicate_active_threads_return_most_recent(self, customer_session, listing, customer, realtor):
        """
        When a race left two active threads, the newest one wins.

        Why it matters: there is no unique constraint, so duplicates can exist.
        """
        older = ThreadFactory(property=listing, customer=customer, realtor=realtor)
        newer = ThreadFactory(property=listing, customer=customer, realtor=realtor)
        Thread.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        result = ThreadService.find_or_create_thread(
            customer_session, listing.id, customer.id, realtor.id
        )

        assert result.data.id == newer.id
        assert Thread.objects.count() == 2

    def test_missing_property_fails_and_creates_nothing(self, customer_session, customer, realtor):
        result = ThreadService.find_or_create_thread(
            customer_session, uuid.uuid4(), customer.id, realtor.id
        )

        assert result.success is False
        assert result.error_code == "NOT_FOUND"
        assert Thread.objects.count() == 0

    def test_malformed_property_id_is_not_found(self, customer_session, customer, realtor):
        result = ThreadService.find_or_create_thread(
            customer_session, "not-a-uuid", customer.id, realtor.id
        )

        assert result.error_code == "NOT_FOUND"

    def test_missing_realtor_fails(self, customer_session, listing, customer):
        result = ThreadService.find_or_create_thread(
            customer_session, listing.id, customer.id, 999999
        )

        assert result.error_code == "NOT_FOUND"
        assert Thread.objects.count() == 0

    @pytest.mark.parametrize("missing", ["property_id", "customer_id", "realtor_id"])
    def test_missing_identifier_is_validation_error(self, customer_session, listing, customer, realtor, missing):
        kwargs = {
            "property_id": listing.id,
            "customer_id": customer.id,
            "realtor_id": realtor.id,
        }
        kwargs[missing] = None

        result = ThreadService.find_or_create_thread(customer_session, **kwargs)

        assert result.error_code == "VALIDATION_ERROR"
        assert missing in result.errors

    def test_anonymous_session_is_unauthenticated(self, anonymous_session, listing, customer, realtor):
        result = ThreadService.find_or_create_thread(
            anonymous_session, listing.id, customer.id, realtor.id
        )

        assert result.error_code == "UNAUTHENTICATED"
        assert Thread.objects.count() == 0

    def test_database_failure_raises_backend_unavailable(self, customer_session, listing, customer, realtor):
        """
        Driver errors surface as BackendUnavailableError, not a failure result.

        Why it matters: callers distinguish outages from expected failures.
        """
        with mock.patch.object(Thread.objects, "create", side_effect=DatabaseError("down")):
            with pytest.raises(BackendUnavailableError) as exc_info:
                ThreadService.find_or_create_thread(
                    customer_session, listing.id, customer.id, realtor.id
                )

        assert exc_info.value.error_code == "BACKEND_UNAVAILABLE"


# =============================================================================
# TestStartThreadForProperty
# =============================================================================


class TestStartThreadForProperty:
    """Tests for ThreadService.start_thread_for_property()."""

    def test_uses_listing_realtor_and_session_customer(self, customer_session, listing, customer, realtor):
        result = ThreadService.start_thread_for_property(customer_session, listing.id)

        assert result.success is True
        assert result.data.customer_id == customer.id
        assert result.data.realtor_id == realtor.id

    def test_missing_listing_is_not_found(self, customer_session):
        result = ThreadService.start_thread_for_property(customer_session, uuid.uuid4())

        assert result.error_code == "NOT_FOUND"

    def test_realtor_cannot_chat_about_own_listing(self, realtor_session, listing):
        result = ThreadService.start_thread_for_property(realtor_session, listing.id)

        assert result.error_code == "VALIDATION_ERROR"
        assert Thread.objects.count() == 0


# =============================================================================
# TestListThreadsForUser
# =============================================================================


class TestListThreadsForUser:
    """
    Tests for ThreadService.list_threads_for_user().

    Verifies:
    - Role-based filtering
    - Newest-activity-first ordering
    - Enrichment with property, counterpart and latest message
    """

    def test_realtor_sees_threads_where_they_answer(self, realtor_session, thread, realtor):
        ThreadFactory()  # someone else's thread

        result = ThreadService.list_threads_for_user(realtor_session, realtor.id, "realtor")

        assert result.success is True
        assert [s.id for s in result.data] == [thread.id]

    def test_customer_sees_threads_they_opened(self, customer_session, thread, customer):
        ThreadFactory()

        result = ThreadService.list_threads_for_user(customer_session, customer.id, "customer")

        assert [s.id for s in result.data] == [thread.id]

    def test_other_roles_see_both_sides(self, advisor):
        session = ChatSession.from_user(advisor)
        as_customer = ThreadFactory(customer=advisor)
        listing = PropertyFactory(realtor=advisor)
        as_realtor = ThreadFactory(property=listing)

        result = ThreadService.list_threads_for_user(session, advisor.id, "advisor")

        assert {s.id for s in result.data} == {as_customer.id, as_realtor.id}

    def test_ordered_by_newest_activity(self, customer_session, customer):
        first = ThreadFactory(customer=customer)
        second = ThreadFactory(customer=customer)
        Thread.objects.filter(pk=second.pk).update(updated_at=timezone.now() - timedelta(hours=1))

        result = ThreadService.list_threads_for_user(customer_session, customer.id, "customer")

        assert [s.id for s in result.data] == [first.id, second.id]

    def test_includes_archived_threads(self, customer_session, customer):
        archived = ThreadFactory(customer=customer, status=ThreadStatus.ARCHIVED)

        result = ThreadService.list_threads_for_user(customer_session, customer.id, "customer")

        assert result.data[0].id == archived.id
        assert result.data[0].status == ThreadStatus.ARCHIVED

    def test_enriches_with_property_counterpart_and_latest_message(self, realtor_session, thread, realtor, customer):
        """
        Realtor's list shows the customer's latest message in context.

        Why it matters: this is what the realtor dashboard renders.
        """
        MessageFactory(thread=thread, sender=customer, body="Hello")
        MessageFactory(thread=thread, sender=customer, body="Is this available?")

        result = ThreadService.list_threads_for_user(realtor_session, realtor.id, "realtor")

        summary = result.data[0]
        assert summary.property_title == "Harbour loft"
        assert summary.property_location == "12 Quay Road"
        assert summary.counterpart_id == customer.id
        assert summary.counterpart_name == "Casey Customer"
        assert summary.last_message_body == "Is this available?"
        assert summary.last_message_sender_id == customer.id

    def test_thread_without_messages_has_empty_preview(self, customer_session, thread, customer):
        result = ThreadService.list_threads_for_user(customer_session, customer.id, "customer")

        assert result.data[0].last_message_body == ""
        assert result.data[0].last_message_at is None

    def test_missing_enrichment_keeps_thread_with_empty_fields(self, customer_session, thread, customer):
        """
        Threads whose property is absent from the second fetch are kept.

        Why it matters: the merge is by id and must not drop threads.
        """
        with mock.patch(
            "properties.models.Property.objects.only"
        ) as only:
            only.return_value.in_bulk.return_value = {}
            result = ThreadService.list_threads_for_user(customer_session, customer.id, "customer")

        assert [s.id for s in result.data] == [thread.id]
        assert result.data[0].property_title == ""
        assert result.data[0].property_location == ""

    def test_user_without_threads_gets_empty_list(self, customer_session, customer):
        result = ThreadService.list_threads_for_user(customer_session, customer.id, "customer")

        assert result.success is True
        assert result.data == []

    def test_anonymous_session_is_unauthenticated(self, anonymous_session, customer):
        result = ThreadService.list_threads_for_user(anonymous_session, customer.id, "customer")

        assert result.error_code == "UNAUTHENTICATED"


# =============================================================================
# TestGetThread
# =============================================================================


class TestGetThread:
    """Tests for ThreadService.get_thread()."""

    def test_returns_thread(self, customer_session, thread):
        result = ThreadService.get_thread(customer_session, thread.id)

        assert result.success is True
        assert result.data == thread

    def test_missing_thread_is_not_found(self, customer_session):
        result = ThreadService.get_thread(customer_session, 424242)

        assert result.error_code == "NOT_FOUND"

    def test_malformed_id_is_not_found(self, customer_session):
        result = ThreadService.get_thread(customer_session, "abc")

        assert result.error_code == "NOT_FOUND"


# =============================================================================
# TestArchiveThread
# =============================================================================


class TestArchiveThread:
    """Tests for ThreadService.archive_thread()."""

    def test_sets_status_archived(self, customer_session, thread):
        result = ThreadService.archive_thread(customer_session, thread.id)

        assert result.success is True
        thread.refresh_from_db()
        assert thread.status == ThreadStatus.ARCHIVED

    def test_missing_thread_is_idempotent_noop(self, customer_session, thread):
        """
        Archiving an unknown id succeeds and writes nothing.

        Why it matters: archive is safe to retry from the UI.
        """
        before = Thread.objects.get(pk=thread.pk).updated_at

        result = ThreadService.archive_thread(customer_session, 424242)

        assert result.success is True
        assert result.data is None
        assert Thread.objects.get(pk=thread.pk).updated_at == before
        assert Thread.objects.filter(status=ThreadStatus.ARCHIVED).count() == 0

    def test_archiving_twice_is_noop(self, customer_session, thread):
        ThreadService.archive_thread(customer_session, thread.id)
        result = ThreadService.archive_thread(customer_session, thread.id)

        assert result.success is True
        assert result.data.status == ThreadStatus.ARCHIVED

    def test_anonymous_session_is_unauthenticated(self, anonymous_session, thread):
        result = ThreadService.archive_thread(anonymous_session, thread.id)

        assert result.error_code == "UNAUTHENTICATED"
        thread.refresh_from_db()
        assert thread.status == ThreadStatus.ACTIVE


# =============================================================================
# TestListMessages
# =============================================================================


class TestListMessages:
    """Tests for MessageService.list_messages()."""

    def test_returns_messages_in_send_order(self, customer_session, thread, customer, realtor):
        first = MessageFactory(thread=thread, sender=customer, body="Hi")
        second = MessageFactory(thread=thread, sender=realtor, body="Hello!")
        third = MessageFactory(thread=thread, sender=customer, body="Viewing?")

        result = MessageService.list_messages(customer_session, thread.id)

        assert [m.id for m in result.data] == [first.id, second.id, third.id]

    def test_ties_on_created_at_break_by_id(self, customer_session, thread):
        first = MessageFactory(thread=thread)
        second = MessageFactory(thread=thread)
        Message.objects.filter(pk__in=[first.pk, second.pk]).update(created_at=timezone.now())

        result = MessageService.list_messages(customer_session, thread.id)

        assert [m.id for m in result.data] == [first.id, second.id]

    def test_only_messages_of_that_thread(self, customer_session, thread):
        MessageFactory(thread=thread)
        MessageFactory()

        result = MessageService.list_messages(customer_session, thread.id)

        assert len(result.data) == 1

    def test_missing_thread_is_not_found(self, customer_session):
        result = MessageService.list_messages(customer_session, 424242)

        assert result.error_code == "NOT_FOUND"


# =============================================================================
# TestSendMessage
# =============================================================================


class TestSendMessage:
    """
    Tests for MessageService.send_message().

    Verifies:
    - Body trimming and validation
    - Thread last-activity touch
    - Participant check
    """

    def test_stores_trimmed_body(self, customer_session, thread, customer):
        result = MessageService.send_message(
            customer_session, thread.id, customer.id, "  Is this available?  "
        )

        assert result.success is True
        assert result.data.body == "Is this available?"
        assert Message.objects.filter(thread=thread).count() == 1

    def test_touches_thread_updated_at(self, customer_session, thread, customer):
        """
        Sending advances the thread's last-activity timestamp.

        Why it matters: thread lists are ordered by last activity.
        """
        stale = timezone.now() - timedelta(days=1)
        Thread.objects.filter(pk=thread.pk).update(updated_at=stale)

        MessageService.send_message(customer_session, thread.id, customer.id, "Hello")

        thread.refresh_from_db()
        assert thread.updated_at > stale

    @pytest.mark.parametrize("body", ["", "   ", "\n\t ", None])
    def test_blank_body_is_validation_error(self, customer_session, thread, customer, body):
        result = MessageService.send_message(customer_session, thread.id, customer.id, body)

        assert result.error_code == "VALIDATION_ERROR"
        assert Message.objects.count() == 0

    def test_oversized_body_is_validation_error(self, customer_session, thread, customer):
        body = "x" * (MESSAGE_CONFIG.MAX_BODY_LENGTH + 1)

        result = MessageService.send_message(customer_session, thread.id, customer.id, body)

        assert result.error_code == "VALIDATION_ERROR"
        assert Message.objects.count() == 0

    def test_missing_thread_is_not_found(self, customer_session, customer):
        result = MessageService.send_message(customer_session, 424242, customer.id, "Hello")

        assert result.error_code == "NOT_FOUND"

    def test_non_participant_sender_is_rejected(self, customer_session, thread, outsider):
        result = MessageService.send_message(customer_session, thread.id, outsider.id, "Hello")

        assert result.error_code == "VALIDATION_ERROR"
        assert Message.objects.count() == 0

    def test_anonymous_session_is_unauthenticated(self, anonymous_session, thread, customer):
        result = MessageService.send_message(anonymous_session, thread.id, customer.id, "Hello")

        assert result.error_code == "UNAUTHENTICATED"
        assert Message.objects.count() == 0

    def test_touch_failure_leaves_inserted_message(self, customer_session, thread, customer):
        """
        The two writes are not atomic: a failed touch keeps the message.

        Why it matters: documents the known partial-write behavior.
        """
        real_filter = Thread.objects.filter
        querysets = []

        def filter_then_fail(*args, **kwargs):
            queryset = real_filter(*args, **kwargs)
            querysets.append(queryset)
            if len(querysets) == 2:
                queryset.update = mock.Mock(side_effect=DatabaseError("down"))
            return queryset

        with mock.patch.object(Thread.objects, "filter", side_effect=filter_then_fail):
            with pytest.raises(BackendUnavailableError):
                MessageService.send_message(customer_session, thread.id, customer.id, "Hello")

        assert Message.objects.filter(thread=thread, body="Hello").exists()


class TestRealtorCustomerScenario:
    """Customer contacts a realtor for the first time; the realtor sees it."""

    def test_first_contact_flow(self, db):
        realtor = RealtorFactory()
        customer = CustomerFactory()
        listing = PropertyFactory(realtor=realtor)
        customer_session = ChatSession.from_user(customer)

        created = ThreadService.find_or_create_thread(
            customer_session, listing.id, customer.id, realtor.id
        ).data
        before = Thread.objects.get(pk=created.id).updated_at
        MessageService.send_message(customer_session, created.id, customer.id, "Is this available?")

        realtor_view = ThreadService.list_threads_for_user(
            ChatSession.from_user(realtor), realtor.id, "realtor"
        ).data

        assert [s.id for s in realtor_view] == [created.id]
        assert realtor_view[0].last_message_body == "Is this available?"
        assert realtor_view[0].updated_at >= before
