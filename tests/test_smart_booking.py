"""Tests for smart booking suggestions."""

import random
from datetime import timedelta
from uuid import uuid4

import pytest

from drivetime_scheduler.domain.booking import SmartBookingPreferences, TimeOfDay
from drivetime_scheduler.domain.errors import NotFoundError, ValidationError
from drivetime_scheduler.domain.sessions import SessionType
from tests.conftest import Factory

THURSDAY = 4
FRIDAY = 5


def _suggest(factory: Factory, learner, **preferences):
    return factory.container.matcher.suggest(
        learner.id, SmartBookingPreferences(**preferences)
    )


def test_smart_booking_respects_overlap(factory: Factory) -> None:
    learner = factory.learner()
    first = factory.session(factory.teacher(), factory.at(hour=9))
    second = factory.session(factory.teacher(), factory.at(hour=9))

    results = _suggest(
        factory,
        learner,
        session_count=2,
        preferred_time=TimeOfDay.MORNING,
        preferred_days=frozenset({THURSDAY}),
    )

    assert len(results) == 1
    assert results[0].session.id in {first.id, second.id}
    assert results[0].match_reasons == ("Preferred Day", "Matches Morning preference")


def test_results_follow_score_not_time(factory: Factory) -> None:
    learner = factory.learner()
    favourite = factory.teacher()
    other = factory.teacher()
    best = factory.session(favourite, factory.at(days=2, hour=9))
    morning = factory.session(other, factory.at(days=1, hour=9))
    afternoon = factory.session(other, factory.at(days=2, hour=14))

    results = _suggest(
        factory,
        learner,
        session_count=3,
        preferred_time=TimeOfDay.MORNING,
        preferred_teacher_id=str(favourite.id),
        preferred_days=frozenset({FRIDAY}),
    )

    assert [item.session.id for item in results] == [
        best.id,
        morning.id,
        afternoon.id,
    ]
    assert results[0].match_reasons == (
        "Preferred Teacher",
        "Preferred Day",
        "Matches Morning preference",
    )
    assert 100 <= results[0].score <= 110
    assert results[1].match_reasons == ("Matches Morning preference",)
    assert results[2].match_reasons == ("Preferred Day",)


def test_any_time_preference_adds_no_time_score(factory: Factory) -> None:
    learner = factory.learner()
    factory.session(factory.teacher(), factory.at(hour=9))

    results = _suggest(factory, learner, session_count=1)

    assert results[0].match_reasons == ()
    assert 0 <= results[0].score <= 10


def test_candidate_pool_filters(factory: Factory, clock) -> None:
    learner = factory.learner()
    teacher = factory.teacher()
    service = factory.container.session_service
    edge = factory.session(teacher, clock.now + timedelta(days=7))
    factory.session(teacher, clock.now + timedelta(days=7, hours=2))
    factory.session(teacher, factory.at(hour=9), session_type=SessionType.THEORY)
    booked = factory.session(teacher, factory.at(hour=11))
    service.book(booked.id, factory.learner())

    results = _suggest(factory, learner, session_count=5)

    assert [item.session.id for item in results] == [edge.id]


def test_skips_slots_clashing_with_existing_bookings(factory: Factory) -> None:
    learner = factory.learner()
    service = factory.container.session_service
    mine = factory.session(factory.teacher(), factory.at(hour=10))
    service.book(mine.id, learner)
    factory.session(factory.teacher(), factory.at(hour=10, minute=30))
    free = factory.session(factory.teacher(), factory.at(hour=11))

    results = _suggest(factory, learner, session_count=5)

    assert [item.session.id for item in results] == [free.id]


def test_jitter_is_reproducible_with_seeded_rng(factory: Factory) -> None:
    learner = factory.learner()
    factory.session(factory.teacher(), factory.at(hour=9))
    matcher = factory.container.matcher
    preferences = SmartBookingPreferences(session_count=1)

    matcher.rng = random.Random(42)
    first = matcher.suggest(learner.id, preferences)
    matcher.rng = random.Random(42)
    second = matcher.suggest(learner.id, preferences)

    assert first[0].score == second[0].score


@pytest.mark.parametrize(
    "preferences",
    [
        {"session_count": 0},
        {"session_count": 6},
        {"session_count": 1, "preferred_days": frozenset({7})},
    ],
)
def test_invalid_preferences(factory: Factory, preferences) -> None:
    with pytest.raises(ValidationError):
        _suggest(factory, factory.learner(), **preferences)


def test_unknown_learner(factory: Factory) -> None:
    with pytest.raises(NotFoundError):
        factory.container.matcher.suggest(
            uuid4(), SmartBookingPreferences(session_count=1)
        )
