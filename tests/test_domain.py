"""Unit tests for domain primitives.

These test invariants that must hold at construction time and the
lifecycle rules of each entity.
Run with: pytest tests/test_domain.py -v
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from eventdesk.domain import (
    Availability,
    Capacity,
    EventId,
    EventStatus,
    Money,
    ProfileId,
    Registration,
    RegistrationId,
    RegistrationStatus,
    Role,
    Task,
    TaskId,
    TaskStatus,
    TicketNumber,
)
from eventdesk.domain.errors import ErrorCode, InvalidTransitionError, NotFoundError

NOW = datetime(2030, 1, 10, 12, 0, tzinfo=UTC)


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(Decimal("19.99")).amount == Decimal("19.99")

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(Decimal("0")).amount == 0

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("5"))) == "5.00"


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        assert Capacity(120).value == 120

    def test_capacity_rejects_zero(self):
        """An event needs at least one seat."""
        with pytest.raises(ValueError):
            Capacity(0)

    def test_capacity_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Capacity(-3)


class TestEventId:
    """Tests for EventId value object."""

    def test_from_string_valid_uuid(self):
        """EventId.from_string parses valid UUID."""
        raw = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
        assert str(EventId.from_string(raw)) == raw

    def test_from_string_invalid_uuid(self):
        """EventId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")

    def test_ids_of_different_entities_are_not_equal(self):
        event_id = EventId.new()
        assert ProfileId(event_id.value) != event_id


class TestTicketNumber:
    def test_generate_matches_format(self):
        ticket = TicketNumber.generate()
        assert ticket.value.startswith("TKT-")
        assert len(ticket.value) == 12
        assert ticket.value[4:] == ticket.value[4:].upper()

    def test_rejects_malformed_value(self):
        with pytest.raises(ValueError):
            TicketNumber("TKT-12")

    def test_rejects_lowercase_hex(self):
        with pytest.raises(ValueError):
            TicketNumber("TKT-abcdef12")


class TestRole:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("organizer", Role.ORGANIZER),
            ("volunteer", Role.VOLUNTEER),
            ("Organizer", Role.ATTENDEE),
            ("ORGANIZER", Role.ATTENDEE),
            (" organizer ", Role.ATTENDEE),
            ("admin", Role.ATTENDEE),
            (None, Role.ATTENDEE),
            (42, Role.ATTENDEE),
        ],
    )
    def test_parse_falls_back_to_attendee(self, raw, expected):
        assert Role.parse(raw) is expected


class TestEvent:
    def test_published_future_event_is_bookable(self, make_event, clock):
        event = make_event()
        assert event.is_bookable(clock())

    def test_started_event_is_not_bookable(self, make_event, clock):
        event = make_event(starts_at=clock() - timedelta(minutes=1))
        assert not event.is_bookable(clock())

    def test_draft_event_is_not_bookable(self, make_event, clock):
        assert not make_event(status=EventStatus.DRAFT).is_bookable(clock())

    def test_draft_can_be_published(self, make_event, clock):
        event = make_event(status=EventStatus.DRAFT)
        later = clock() + timedelta(hours=1)
        published = event.transition_to(EventStatus.PUBLISHED, later)
        assert published.status is EventStatus.PUBLISHED
        assert published.updated_at == later

    def test_completed_event_cannot_reopen(self, make_event, clock):
        event = make_event(status=EventStatus.COMPLETED)
        with pytest.raises(InvalidTransitionError) as exc_info:
            event.transition_to(EventStatus.PUBLISHED, clock())
        assert exc_info.value.code is ErrorCode.INVALID_TRANSITION

    def test_same_status_is_a_no_op(self, make_event, clock):
        event = make_event()
        assert event.transition_to(EventStatus.PUBLISHED, clock()) is event


def _registration(status: RegistrationStatus = RegistrationStatus.CONFIRMED) -> Registration:
    return Registration(
        id=RegistrationId.new(),
        event_id=EventId.new(),
        attendee_id=ProfileId.new(),
        ticket_number=TicketNumber("TKT-0000ABCD"),
        status=status,
        registered_at=NOW,
    )


class TestRegistration:
    def test_cancel_frees_the_seat(self):
        cancelled = _registration().cancel()
        assert cancelled.status is RegistrationStatus.CANCELLED
        assert not cancelled.occupies_seat
        assert not cancelled.is_active

    def test_cancel_twice_fails(self):
        with pytest.raises(InvalidTransitionError):
            _registration().cancel().cancel()

    def test_attended_registration_cannot_be_cancelled(self):
        with pytest.raises(InvalidTransitionError):
            _registration(RegistrationStatus.ATTENDED).cancel()

    def test_check_in_marks_attended(self):
        checked_in = _registration().check_in(NOW)
        assert checked_in.status is RegistrationStatus.ATTENDED
        assert checked_in.checked_in
        assert checked_in.checked_in_at == NOW
        assert checked_in.occupies_seat

    def test_check_in_without_attendance_keeps_status(self):
        checked_in = _registration().check_in(NOW, mark_attended=False)
        assert checked_in.status is RegistrationStatus.CONFIRMED
        assert checked_in.checked_in

    def test_check_in_twice_fails(self):
        once = _registration().check_in(NOW, mark_attended=False)
        with pytest.raises(InvalidTransitionError):
            once.check_in(NOW, mark_attended=False)

    def test_checked_in_registration_can_be_marked_attended_later(self):
        once = _registration().check_in(NOW, mark_attended=False)
        attended = once.check_in(NOW + timedelta(hours=1))
        assert attended.status is RegistrationStatus.ATTENDED
        assert attended.checked_in_at == NOW

    def test_attended_registration_cannot_check_in_again(self):
        with pytest.raises(InvalidTransitionError):
            _registration().check_in(NOW).check_in(NOW)

    def test_pending_registration_does_not_occupy_a_seat(self):
        pending = _registration(RegistrationStatus.PENDING)
        assert pending.is_active
        assert not pending.occupies_seat
        assert pending.confirm().occupies_seat

    def test_only_pending_can_be_confirmed(self):
        with pytest.raises(InvalidTransitionError):
            _registration().confirm()


class TestTask:
    def _task(self) -> Task:
        return Task(
            id=TaskId.new(),
            event_id=EventId.new(),
            title="Set up chairs",
            status=TaskStatus.PENDING,
            created_at=NOW,
        )

    def test_completing_stamps_completed_at(self):
        done = self._task().with_status(TaskStatus.COMPLETED, NOW)
        assert done.completed_at == NOW

    def test_reopening_clears_completed_at(self):
        done = self._task().with_status(TaskStatus.COMPLETED, NOW)
        reopened = done.with_status(TaskStatus.IN_PROGRESS, NOW + timedelta(hours=1))
        assert reopened.status is TaskStatus.IN_PROGRESS
        assert reopened.completed_at is None

    def test_same_status_keeps_timestamp(self):
        done = self._task().with_status(TaskStatus.COMPLETED, NOW)
        assert done.with_status(TaskStatus.COMPLETED, NOW + timedelta(days=1)) is done


class TestAvailability:
    def test_available_never_negative(self):
        assert Availability(EventId.new(), capacity=2, occupied=3).available == 0

    def test_available_is_capacity_minus_occupied(self):
        assert Availability(EventId.new(), capacity=5, occupied=2).available == 3


class TestDomainErrors:
    def test_str_includes_code_and_message(self):
        error = NotFoundError("Event")
        assert str(error) == "NOT_FOUND: Event not found"
        assert error.message == "Event not found"

    def test_errors_are_exceptions(self):
        with pytest.raises(NotFoundError):
            raise NotFoundError("Task")

