"""Tests for vehicle availability checks."""

from datetime import UTC, datetime, timedelta
from itertools import product
from uuid import uuid4

import pytest

from drivetime_scheduler.domain.sessions import intervals_overlap
from drivetime_scheduler.domain.vehicles import VehicleStatus
from tests.conftest import Factory


def _hour(value: float) -> datetime:
    return datetime(2026, 10, 15, tzinfo=UTC) + timedelta(hours=value)


@pytest.mark.parametrize(
    ("first", "second", "expected"),
    [
        ((9, 10), (9.5, 10.5), True),
        ((9, 10), (10, 11), False),
        ((9, 10), (8, 9), False),
        ((9, 12), (10, 11), True),
        ((9, 10), (9, 10), True),
    ],
)
def test_intervals_overlap_half_open(first, second, expected) -> None:
    a_start, a_end = (_hour(value) for value in first)
    b_start, b_end = (_hour(value) for value in second)

    assert intervals_overlap(a_start, a_end, b_start, b_end) is expected


def test_intervals_overlap_is_symmetric() -> None:
    points = [8, 8.5, 9, 9.5, 10, 11]
    intervals = [(a, b) for a, b in product(points, points) if a < b]

    for (a_start, a_end), (b_start, b_end) in product(intervals, intervals):
        forward = intervals_overlap(
            _hour(a_start), _hour(a_end), _hour(b_start), _hour(b_end)
        )
        backward = intervals_overlap(
            _hour(b_start), _hour(b_end), _hour(a_start), _hour(a_end)
        )
        assert forward == backward


def test_unknown_vehicle_is_unavailable(factory: Factory) -> None:
    checker = factory.container.availability

    assert not checker.is_available(uuid4(), factory.at(hour=9), factory.at(hour=10))


def test_inactive_vehicle_is_unavailable(factory: Factory) -> None:
    vehicle = factory.vehicle()
    factory.container.vehicle_service.update_status(
        vehicle.id, VehicleStatus.MAINTENANCE, factory.admin()
    )

    checker = factory.container.availability

    assert not checker.is_available(vehicle.id, factory.at(hour=9), factory.at(hour=10))


def test_available_session_does_not_hold_vehicle(factory: Factory) -> None:
    vehicle = factory.vehicle()
    teacher = factory.teacher()
    factory.session(teacher, factory.at(hour=9), vehicle_id=vehicle.id)

    checker = factory.container.availability

    assert checker.is_available(vehicle.id, factory.at(hour=9), factory.at(hour=10))


def test_booked_session_holds_vehicle_for_overlapping_windows(
    factory: Factory,
) -> None:
    vehicle = factory.vehicle()
    teacher = factory.teacher()
    learner = factory.learner()
    session = factory.session(teacher, factory.at(hour=9), vehicle_id=vehicle.id)
    factory.container.session_service.book(session.id, learner)

    checker = factory.container.availability

    assert not checker.is_available(
        vehicle.id, factory.at(hour=9, minute=30), factory.at(hour=10, minute=30)
    )
    assert checker.is_available(vehicle.id, factory.at(hour=10), factory.at(hour=11))
    assert checker.is_available(
        vehicle.id,
        factory.at(hour=9, minute=30),
        factory.at(hour=10, minute=30),
        exclude_session_id=session.id,
    )


def test_available_vehicles_lists_only_free_active_ones(factory: Factory) -> None:
    free = factory.vehicle(name="Free")
    busy = factory.vehicle(name="Busy")
    retired = factory.vehicle(name="Retired")
    factory.container.vehicle_service.update_status(
        retired.id, VehicleStatus.RETIRED, factory.admin()
    )
    session = factory.session(
        factory.teacher(), factory.at(hour=9), vehicle_id=busy.id
    )
    factory.container.session_service.book(session.id, factory.learner())

    vehicles = factory.container.availability.available_vehicles(
        factory.at(hour=9), factory.at(hour=10)
    )

    assert [vehicle.id for vehicle in vehicles] == [free.id]
