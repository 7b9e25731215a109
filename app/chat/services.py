"""
Chat system service layer.

This module is the chat data accessor: every read and write of threads and
messages goes through it, and every operation takes an explicit
ChatSession instead of looking up the current user itself.

Services:
    ThreadService: Thread lifecycle (find-or-create, list, get, archive)
    MessageService: Message operations (list, send)

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure() with one of
      UNAUTHENTICATED, VALIDATION_ERROR or NOT_FOUND
    - Database failures raise BackendUnavailableError and are not retried

Known gaps (left as-is on purpose, see DESIGN.md):
    - find_or_create_thread is check-then-insert without a lock or unique
      constraint; two concurrent callers can both create a thread.
    - send_message inserts the message and touches the thread in two
      separate statements; a failure between them leaves a message whose
      thread still shows the old activity time.

Usage:
    from chat.services import MessageService, ThreadService
    from chat.session import ChatSession

    session = ChatSession.from_user(request.user)

    result = ThreadService.start_thread_for_property(session, property_id)
    if result.success:
        summary = result.data

    result = MessageService.send_message(
        session,
        thread_id=summary.id,
        sender_id=session.user_id,
        body="Is this still available?",
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db.models import OuterRef, Q, Subquery
from django.utils import timezone

from core.exceptions import NOT_FOUND, UNAUTHENTICATED, VALIDATION_ERROR
from core.services import BaseService, ServiceResult
from properties.services import PropertyService

from chat.constants import MESSAGE_CONFIG
from chat.models import Message, Thread, ThreadStatus

if TYPE_CHECKING:
    from datetime import datetime

    from authentication.models import User
    from properties.models import Property

    from chat.session import ChatSession


def _as_id(value) -> int | None:
    """Coerce a thread/user id from a URL or frame to int, None when malformed."""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _require_session(session: ChatSession) -> ServiceResult | None:
    if session is None or not session.is_authenticated:
        return ServiceResult.failure(
            "Authentication required",
            error_code=UNAUTHENTICATED,
        )
    return None


@dataclass
class ThreadSummary:
    """
    A thread as shown in thread lists, seen from one viewer.

    Enrichment fields are empty strings/None when the referenced property,
    counterpart or message could not be resolved.
    """

    id: int
    property_id: object
    customer_id: int
    realtor_id: int
    status: str
    created_at: datetime
    updated_at: datetime
    property_title: str = ""
    property_location: str = ""
    counterpart_id: int | None = None
    counterpart_name: str = ""
    counterpart_role: str = ""
    last_message_body: str = ""
    last_message_at: datetime | None = None
    last_message_sender_id: int | None = None
    created: bool = False

    @classmethod
    def build(
        cls,
        thread: Thread,
        viewer_id: int | None,
        prop: Property | None = None,
        counterpart: User | None = None,
        last_message: Message | None = None,
        created: bool = False,
    ) -> ThreadSummary:
        counterpart_id = thread.counterpart_id(viewer_id) if viewer_id is not None else None
        summary = cls(
            id=thread.pk,
            property_id=thread.property_id,
            customer_id=thread.customer_id,
            realtor_id=thread.realtor_id,
            status=thread.status,
            created_at=thread.created_at,
            updated_at=thread.updated_at,
            counterpart_id=counterpart_id,
            created=created,
        )
        if prop is not None:
            summary.property_title = prop.title
            summary.property_location = prop.location
        if counterpart is not None:
            summary.counterpart_name = counterpart.display_name
            summary.counterpart_role = counterpart.role
        if last_message is not None:
            summary.last_message_body = last_message.body[: MESSAGE_CONFIG.PREVIEW_LENGTH]
            summary.last_message_at = last_message.created_at
            summary.last_message_sender_id = last_message.sender_id
        return summary


class ThreadService(BaseService):
    """
    Service for thread lifecycle operations.

    Methods:
        find_or_create_thread: Reuse or open the active thread for a triple
        start_thread_for_property: "Chat with realtor" entry point
        list_threads_for_user: Threads where a user participates, enriched
        get_thread: Single thread
        archive_thread: Archive a thread (idempotent when missing)
    """

    @classmethod
    def find_or_create_thread(
        cls,
        session: ChatSession,
        property_id,
        customer_id,
        realtor_id,
    ) -> ServiceResult[ThreadSummary]:
        """
        Return the active thread for (property, customer, realtor), creating it if needed.

        Implementation:
            1. Resolve the property (NOT_FOUND if missing, nothing created)
            2. Look up active threads for the triple, newest first
            3. Reuse the newest one, or insert a new active thread

        When earlier races left duplicate active threads, the most recently
        created one is returned; duplicates are not merged.

        Args:
            session: Caller's session
            property_id: Listing id
            customer_id: Customer user id
            realtor_id: Realtor user id

        Returns:
            ServiceResult with a ThreadSummary carrying the property's
            title and location. ``created`` tells whether a row was inserted.

        Error codes:
            UNAUTHENTICATED: Session has no user
            VALIDATION_ERROR: Missing or malformed identifier
            NOT_FOUND: Property, customer or realtor does not exist
        """
        if (failure := _require_session(session)) is not None:
            return failure

        validation = cls.validate_required(
            property_id=property_id,
            customer_id=customer_id,
            realtor_id=realtor_id,
        )
        if validation is not None:
            return validation

        customer_pk, realtor_pk = _as_id(customer_id), _as_id(realtor_id)
        if customer_pk is None or realtor_pk is None:
            errors = {}
            if customer_pk is None:
                errors["customer_id"] = ["A valid user id is required."]
            if realtor_pk is None:
                errors["realtor_id"] = ["A valid user id is required."]
            return ServiceResult.failure(
                "Invalid participant id",
                error_code=VALIDATION_ERROR,
                errors=errors,
            )

        property_result = PropertyService.get_property_details(property_id)
        if not property_result.success:
            return property_result
        prop = property_result.data

        user_model = get_user_model()
        with cls.backend_call("resolve thread participants"):
            users = user_model.objects.in_bulk([customer_pk, realtor_pk])
        if customer_pk not in users or realtor_pk not in users:
            return ServiceResult.failure(
                "Thread participant not found",
                error_code=NOT_FOUND,
            )

        viewer_id = session.user_id
        with cls.backend_call("find thread"):
            existing = (
                Thread.objects.filter(
                    property_id=prop.pk,
                    customer_id=customer_pk,
                    realtor_id=realtor_pk,
                    status=ThreadStatus.ACTIVE,
                )
                .order_by("-created_at", "-id")
                .first()
            )

        if existing is not None:
            cls.get_logger().debug(
                f"Found existing thread {existing.id} for property {prop.pk} "
                f"between customer {customer_pk} and realtor {realtor_pk}"
            )
            counterpart = users.get(existing.counterpart_id(viewer_id))
            return ServiceResult.success(
                ThreadSummary.build(existing, viewer_id, prop=prop, counterpart=counterpart)
            )

        # No lock between the lookup above and this insert
        with cls.backend_call("create thread"):
            thread = Thread.objects.create(
                property_id=prop.pk,
                customer_id=customer_pk,
                realtor_id=realtor_pk,
                status=ThreadStatus.ACTIVE,
            )

        cls.get_logger().info(
            f"Created thread {thread.id} for property {prop.pk} "
            f"between customer {customer_pk} and realtor {realtor_pk}"
        )

        counterpart = users.get(thread.counterpart_id(viewer_id))
        return ServiceResult.success(
            ThreadSummary.build(
                thread, viewer_id, prop=prop, counterpart=counterpart, created=True
            )
        )

    @classmethod
    def start_thread_for_property(
        cls,
        session: ChatSession,
        property_id,
    ) -> ServiceResult[ThreadSummary]:
        """
        Open (or reopen) the caller's thread with a listing's realtor.

        The session user is the customer; the realtor is the listing owner.

        Error codes:
            UNAUTHENTICATED: Session has no user
            NOT_FOUND: Listing does not exist
            VALIDATION_ERROR: Caller is the listing's own realtor
        """
        if (failure := _require_session(session)) is not None:
            return failure

        property_result = PropertyService.get_property_details(property_id)
        if not property_result.success:
            return property_result
        prop = property_result.data

        if prop.realtor_id is None:
            return ServiceResult.failure(
                "Property has no realtor",
                error_code=NOT_FOUND,
            )
        if prop.realtor_id == session.user_id:
            return ServiceResult.failure(
                "You cannot start a chat about your own listing",
                error_code=VALIDATION_ERROR,
                errors={"property_id": ["Listing belongs to the current user."]},
            )

        return cls.find_or_create_thread(
            session,
            property_id=prop.pk,
            customer_id=session.user_id,
            realtor_id=prop.realtor_id,
        )

    @classmethod
    def list_threads_for_user(
        cls,
        session: ChatSession,
        user_id,
        role: str | None,
    ) -> ServiceResult[list[ThreadSummary]]:
        """
        List threads a user takes part in, newest activity first.

        ``role="realtor"`` returns threads where the user is the realtor,
        ``role="customer"`` where the user is the customer, and any other
        role returns both. Archived threads are included.

        Enrichment is a second round of queries keyed by id (properties,
        counterparts and latest messages), merged here. A thread whose
        property or counterpart is missing from that round is still listed
        with empty enrichment fields.

        Error codes:
            UNAUTHENTICATED: Session has no user
            VALIDATION_ERROR: Missing or malformed user id
        """
        if (failure := _require_session(session)) is not None:
            return failure

        user_pk = _as_id(user_id)
        if user_pk is None:
            return ServiceResult.failure(
                "A valid user id is required",
                error_code=VALIDATION_ERROR,
                errors={"user_id": ["A valid user id is required."]},
            )

        if role == "realtor":
            participation = Q(realtor_id=user_pk)
        elif role == "customer":
            participation = Q(customer_id=user_pk)
        else:
            participation = Q(realtor_id=user_pk) | Q(customer_id=user_pk)

        with cls.backend_call("list threads"):
            threads = list(
                Thread.objects.filter(participation).order_by("-updated_at", "-id")
            )

        if not threads:
            return ServiceResult.success([])

        properties, users, latest = cls._fetch_enrichment(threads, user_pk)

        summaries = [
            ThreadSummary.build(
                thread,
                user_pk,
                prop=properties.get(thread.property_id),
                counterpart=users.get(thread.counterpart_id(user_pk)),
                last_message=latest.get(thread.pk),
            )
            for thread in threads
        ]
        return ServiceResult.success(summaries)

    @classmethod
    def _fetch_enrichment(
        cls,
        threads: list[Thread],
        viewer_id: int,
    ) -> tuple[dict, dict, dict[int, Message]]:
        """Fetch properties, counterparts and latest messages keyed by id."""
        from properties.models import Property

        property_ids = {thread.property_id for thread in threads}
        counterpart_ids = {thread.counterpart_id(viewer_id) for thread in threads}
        thread_ids = [thread.pk for thread in threads]

        with cls.backend_call("enrich threads"):
            properties = Property.objects.only("id", "title", "location").in_bulk(
                property_ids
            )
            users = get_user_model().objects.in_bulk(counterpart_ids)

            latest_ids = (
                Thread.objects.filter(pk__in=thread_ids)
                .annotate(
                    latest_id=Subquery(
                        Message.objects.filter(thread_id=OuterRef("pk"))
                        .order_by("-created_at", "-id")
                        .values("id")[:1]
                    )
                )
                .exclude(latest_id=None)
                .values_list("latest_id", flat=True)
            )
            latest = {
                message.thread_id: message
                for message in Message.objects.filter(pk__in=list(latest_ids))
            }

        return properties, users, latest

    @classmethod
    def get_thread(cls, session: ChatSession, thread_id) -> ServiceResult[Thread]:
        """
        Fetch one thread with its property and participants.

        Error codes:
            UNAUTHENTICATED: Session has no user
            NOT_FOUND: Thread does not exist
        """
        if (failure := _require_session(session)) is not None:
            return failure

        pk = _as_id(thread_id)
        thread = None
        if pk is not None:
            with cls.backend_call("get thread"):
                thread = (
                    Thread.objects.select_related("property", "customer", "realtor")
                    .filter(pk=pk)
                    .first()
                )

        if thread is None:
            return ServiceResult.failure("Thread not found", error_code=NOT_FOUND)
        return ServiceResult.success(thread)

    @classmethod
    def archive_thread(cls, session: ChatSession, thread_id) -> ServiceResult[Thread | None]:
        """
        Archive a thread.

        A missing thread is not an error: the call succeeds with ``data=None``
        and writes nothing. Archiving an already archived thread is also a
        no-op.

        Error codes:
            UNAUTHENTICATED: Session has no user
        """
        if (failure := _require_session(session)) is not None:
            return failure

        pk = _as_id(thread_id)
        thread = None
        if pk is not None:
            with cls.backend_call("archive thread"):
                thread = Thread.objects.filter(pk=pk).first()

        if thread is None:
            cls.get_logger().debug(f"Archive requested for missing thread {thread_id}")
            return ServiceResult.success(None)

        if thread.status != ThreadStatus.ARCHIVED:
            thread.status = ThreadStatus.ARCHIVED
            with cls.backend_call("archive thread"):
                thread.save(update_fields=["status", "updated_at"])
            cls.get_logger().info(
                f"User {session.user_id} archived thread {thread.id}"
            )

        return ServiceResult.success(thread)


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        list_messages: Messages of a thread in send order
        send_message: Validate and insert a message, then touch the thread
    """

    @classmethod
    def list_messages(
        cls,
        session: ChatSession,
        thread_id,
    ) -> ServiceResult[list[Message]]:
        """
        Return all messages of a thread ordered by (created_at, id).

        Error codes:
            UNAUTHENTICATED: Session has no user
            NOT_FOUND: Thread does not exist
        """
        if (failure := _require_session(session)) is not None:
            return failure

        pk = _as_id(thread_id)
        exists = False
        if pk is not None:
            with cls.backend_call("list messages"):
                exists = Thread.objects.filter(pk=pk).exists()
        if not exists:
            return ServiceResult.failure("Thread not found", error_code=NOT_FOUND)

        with cls.backend_call("list messages"):
            messages = list(
                Message.objects.filter(thread_id=pk)
                .select_related("sender")
                .order_by("created_at", "id")
            )
        return ServiceResult.success(messages)

    @classmethod
    def validate_body(cls, body) -> tuple[str, ServiceResult | None]:
        """
        Trim a message body and check its length.

        Returns:
            (trimmed body, failure result or None)
        """
        text = body.strip() if isinstance(body, str) else ""
        if len(text) < MESSAGE_CONFIG.MIN_BODY_LENGTH:
            return text, ServiceResult.failure(
                "Message body cannot be empty",
                error_code=VALIDATION_ERROR,
                errors={"body": ["This field may not be blank."]},
            )
        if len(text) > MESSAGE_CONFIG.MAX_BODY_LENGTH:
            return text, ServiceResult.failure(
                f"Message body exceeds {MESSAGE_CONFIG.MAX_BODY_LENGTH} characters",
                error_code=VALIDATION_ERROR,
                errors={
                    "body": [
                        f"Ensure this field has no more than "
                        f"{MESSAGE_CONFIG.MAX_BODY_LENGTH} characters."
                    ]
                },
            )
        return text, None

    @classmethod
    def send_message(
        cls,
        session: ChatSession,
        thread_id,
        sender_id,
        body: str,
    ) -> ServiceResult[Message]:
        """
        Send a text message to a thread.

        The body is trimmed first; nothing is written when it is empty.
        The message insert and the thread's last-activity update are two
        separate writes with no surrounding transaction.

        Args:
            session: Caller's session
            thread_id: Target thread
            sender_id: Author user id
            body: Message text

        Returns:
            ServiceResult with the new Message

        Error codes:
            UNAUTHENTICATED: Session has no user
            VALIDATION_ERROR: Empty/oversized body, or sender is not a participant
            NOT_FOUND: Thread does not exist
        """
        if (failure := _require_session(session)) is not None:
            return failure

        text, failure = cls.validate_body(body)
        if failure is not None:
            return failure

        sender_pk = _as_id(sender_id)
        if sender_pk is None:
            return ServiceResult.failure(
                "A valid sender id is required",
                error_code=VALIDATION_ERROR,
                errors={"sender_id": ["A valid user id is required."]},
            )

        pk = _as_id(thread_id)
        participants = None
        if pk is not None:
            with cls.backend_call("send message"):
                participants = (
                    Thread.objects.filter(pk=pk)
                    .values_list("customer_id", "realtor_id")
                    .first()
                )
        if participants is None:
            return ServiceResult.failure("Thread not found", error_code=NOT_FOUND)
        if sender_pk not in participants:
            return ServiceResult.failure(
                "Sender is not a participant in this thread",
                error_code=VALIDATION_ERROR,
                errors={"sender_id": ["Sender must be the customer or the realtor."]},
            )

        with cls.backend_call("send message"):
            message = Message.objects.create(
                thread_id=pk,
                sender_id=sender_pk,
                body=text,
            )

        with cls.backend_call("touch thread"):
            Thread.objects.filter(pk=pk).update(updated_at=timezone.now())

        cls.get_logger().debug(
            f"User {sender_pk} sent message {message.id} to thread {pk}"
        )

        return ServiceResult.success(message)
