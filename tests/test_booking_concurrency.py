"""Concurrent booking tests.

Many attendees race for the last seats of one event; the occupied count must
never pass capacity and every loser must get a clean domain error.
Run with: pytest tests/test_booking_concurrency.py -v
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from eventdesk.domain import RegistrationStatus, Role
from eventdesk.domain.errors import AlreadyRegisteredError, CapacityExceededError, DomainError


def _race(booking_service, bookers, event_id):
    barrier = threading.Barrier(len(bookers))

    def attempt(actor):
        barrier.wait()
        try:
            return booking_service.book(actor, event_id)
        except DomainError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(bookers)) as pool:
        return list(pool.map(attempt, bookers))


class TestConcurrentBooking:
    @pytest.mark.parametrize("capacity,contenders", [(1, 8), (5, 20)])
    def test_capacity_never_exceeded(
        self, booking_service, make_event, make_profile, store, capacity, contenders
    ):
        event = make_event(capacity=capacity)
        attendees = [make_profile(Role.ATTENDEE) for _ in range(contenders)]

        results = _race(booking_service, attendees, event.id)

        booked = [r for r in results if not isinstance(r, DomainError)]
        rejected = [r for r in results if isinstance(r, DomainError)]
        assert len(booked) == capacity
        assert all(isinstance(error, CapacityExceededError) for error in rejected)
        assert store.count_occupied(event.id) == capacity
        assert len({r.ticket_number for r in booked}) == capacity

    def test_same_attendee_books_once(self, booking_service, make_event, attendee, store):
        event = make_event(capacity=10)

        results = _race(booking_service, [attendee] * 6, event.id)

        booked = [r for r in results if not isinstance(r, DomainError)]
        assert len(booked) == 1
        assert all(
            isinstance(r, AlreadyRegisteredError) for r in results if isinstance(r, DomainError)
        )
        active = [
            r for r in store.list_for_event(event.id) if r.status is RegistrationStatus.CONFIRMED
        ]
        assert len(active) == 1

    def test_cancellations_and_bookings_interleave(
        self, booking_service, make_event, make_profile, store
    ):
        event = make_event(capacity=3)
        holders = [make_profile() for _ in range(3)]
        held = [booking_service.book(holder, event.id) for holder in holders]
        newcomers = [make_profile() for _ in range(6)]
        barrier = threading.Barrier(len(holders) + len(newcomers))

        def cancel(pair):
            holder, registration = pair
            barrier.wait()
            booking_service.cancel(holder, registration.id)

        def book(actor):
            barrier.wait()
            try:
                booking_service.book(actor, event.id)
            except CapacityExceededError:
                pass

        with ThreadPoolExecutor(max_workers=len(holders) + len(newcomers)) as pool:
            futures = [pool.submit(cancel, pair) for pair in zip(holders, held)]
            futures += [pool.submit(book, actor) for actor in newcomers]
            for future in futures:
                future.result()

        assert store.count_occupied(event.id) <= 3
