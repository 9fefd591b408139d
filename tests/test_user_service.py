"""Tests for user service."""

import pytest

from drivetime_scheduler.domain.audit import SYSTEM_ACTOR_NAME, SessionAction
from drivetime_scheduler.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from drivetime_scheduler.domain.sessions import SessionStatus, SessionType
from drivetime_scheduler.domain.users import Role, TeacherConstraints
from drivetime_scheduler.services.users import hash_password, verify_password
from tests.conftest import Factory


def test_register_creates_learner(factory: Factory) -> None:
    service = factory.container.user_service

    user = service.register("John Doe", "john@example.com", "secret")

    assert user.role == Role.LEARNER
    assert user.is_active
    assert user.password_hash != "secret"
    notifications = factory.container.notification_service.list_for_user(user.id)
    assert notifications[0].message == "Welcome! You have successfully registered."


def test_register_rejects_duplicate_email(factory: Factory) -> None:
    service = factory.container.user_service
    service.register("John Doe", "john@example.com", "secret")

    with pytest.raises(ConflictError):
        service.register("Johnny", "JOHN@example.com", "other")


def test_register_validates_fields(factory: Factory) -> None:
    service = factory.container.user_service

    with pytest.raises(ValidationError):
        service.register("", "john@example.com", "secret")
    with pytest.raises(ValidationError):
        service.register("John", "not-an-email", "secret")
    with pytest.raises(ValidationError):
        service.register("John", "john@example.com", "")


def test_authenticate(factory: Factory) -> None:
    service = factory.container.user_service
    user = service.register("John Doe", "john@example.com", "secret")

    assert service.authenticate("john@example.com", "secret") == user
    assert service.authenticate("john@example.com", "wrong") is None
    assert service.authenticate("nobody@example.com", "secret") is None


def test_authenticate_disabled_account_names_admin(factory: Factory) -> None:
    service = factory.container.user_service
    admin = factory.admin()
    user = service.register("John Doe", "john@example.com", "secret")
    service.set_active(user.id, False, admin)

    with pytest.raises(AuthorizationError) as excinfo:
        service.authenticate("john@example.com", "secret")

    assert admin.email in excinfo.value.message


def test_verify_password_handles_garbage_hash() -> None:
    assert verify_password("secret", hash_password("secret"))
    assert not verify_password("secret", "not-a-hash")


def test_update_profile_renames_across_sessions(factory: Factory) -> None:
    teacher = factory.teacher(name="Old Name")
    learner = factory.learner()
    sessions = factory.container.session_service
    session = factory.session(teacher, factory.at(hour=10))
    sessions.book(session.id, learner)

    updated = factory.container.user_service.update_profile(
        teacher.id, {"name": "New Name"}, teacher
    )

    assert updated.name == "New Name"
    assert sessions.get_session(session.id).teacher_name == "New Name"


def test_update_profile_permissions(factory: Factory) -> None:
    service = factory.container.user_service
    learner = factory.learner()

    with pytest.raises(AuthorizationError):
        service.update_profile(learner.id, {"name": "Hacked"}, factory.learner())

    updated = service.update_profile(learner.id, {"name": "By Admin"}, factory.admin())
    assert updated.name == "By Admin"


def test_update_profile_email_must_be_unique(factory: Factory) -> None:
    service = factory.container.user_service
    first = factory.learner()
    second = factory.learner()

    with pytest.raises(ConflictError):
        service.update_profile(first.id, {"email": second.email}, first)

    same = service.update_profile(first.id, {"email": first.email}, first)
    assert same.email == first.email


def test_update_profile_changes_password(factory: Factory) -> None:
    service = factory.container.user_service
    learner = factory.learner()

    service.update_profile(learner.id, {"password": "new-secret"}, learner)

    assert service.authenticate(learner.email, "new-secret") is not None
    assert service.authenticate(learner.email, "password") is None


def test_teacher_constraints_merge(factory: Factory) -> None:
    service = factory.container.user_service
    teacher = factory.teacher(
        constraints=TeacherConstraints(max_sessions_per_learner_daily=2)
    )

    updated = service.update_profile(
        teacher.id,
        {"teacher_constraints": {"max_sessions_per_learner_weekly": 5}},
        teacher,
    )
    cleared = service.update_profile(
        teacher.id,
        {"teacher_constraints": {"max_sessions_per_learner_daily": 0}},
        teacher,
    )

    assert updated.teacher_constraints == TeacherConstraints(2, 5)
    assert cleared.teacher_constraints == TeacherConstraints(None, 5)


def test_teacher_constraints_validation(factory: Factory) -> None:
    service = factory.container.user_service
    learner = factory.learner()
    teacher = factory.teacher()

    with pytest.raises(ValidationError):
        service.update_profile(
            learner.id,
            {"teacher_constraints": {"max_sessions_per_learner_daily": 1}},
            learner,
        )
    with pytest.raises(ValidationError):
        service.update_profile(
            teacher.id,
            {"teacher_constraints": {"max_sessions_per_learner_daily": -1}},
            teacher,
        )


def test_admin_create_user(factory: Factory) -> None:
    service = factory.container.user_service
    admin = factory.admin()

    teacher = service.admin_create_user(
        {
            "name": "Sarah Connor",
            "email": "sarah@example.com",
            "password": "secret",
            "role": "TEACHER",
        },
        admin,
    )

    assert teacher.role == Role.TEACHER
    with pytest.raises(ValidationError):
        service.admin_create_user(
            {"name": "X", "email": "x@example.com", "password": "p", "role": "BOSS"},
            admin,
        )
    with pytest.raises(AuthorizationError):
        service.admin_create_user(
            {"name": "X", "email": "x@example.com", "password": "p", "role": "ADMIN"},
            teacher,
        )


def test_deactivating_teacher_removes_future_sessions(
    factory: Factory, clock
) -> None:
    teacher = factory.teacher(name="Sarah Connor")
    learner = factory.learner()
    sessions = factory.container.session_service
    past = factory.session(teacher, factory.at(hour=10))
    future = factory.session(teacher, factory.at(days=2, hour=10))
    sessions.book(future.id, learner)
    clock.advance(days=1, hours=4)

    factory.container.user_service.set_active(teacher.id, False, factory.admin())

    remaining = [session.id for session in sessions.list_sessions()]
    assert remaining == [past.id]
    assert factory.container.audit_service.get_log(future.id) == []
    notifications = factory.container.notification_service.list_for_user(learner.id)
    assert "instructor account is no longer active" in notifications[0].message


def test_deactivating_learner_releases_seats(factory: Factory) -> None:
    teacher = factory.teacher()
    learner = factory.learner(name="John Doe")
    classmate = factory.learner()
    sessions = factory.container.session_service
    practice = factory.session(teacher, factory.at(hour=10))
    theory = factory.session(
        teacher, factory.at(hour=14), session_type=SessionType.THEORY, capacity=2
    )
    sessions.book(practice.id, learner)
    sessions.book(theory.id, classmate)
    sessions.book(theory.id, learner)

    factory.container.user_service.set_active(learner.id, False, factory.admin())

    freed = sessions.get_session(practice.id)
    assert freed.status == SessionStatus.AVAILABLE
    assert freed.learner_ids == ()
    reopened = sessions.get_session(theory.id)
    assert reopened.status == SessionStatus.BOOKED
    assert reopened.learner_ids == (classmate.id,)
    entry = sessions.history(practice.id)[0]
    assert entry.action == SessionAction.CANCEL
    assert entry.actor_name == SYSTEM_ACTOR_NAME
    notifications = factory.container.notification_service.list_for_user(teacher.id)
    assert "John Doe was removed" in notifications[0].message


def test_admins_cannot_be_deactivated_or_deleted(factory: Factory) -> None:
    service = factory.container.user_service
    admin = factory.admin()
    other_admin = factory.admin()

    with pytest.raises(ConflictError):
        service.set_active(other_admin.id, False, admin)
    with pytest.raises(ConflictError):
        service.delete_user(other_admin.id, admin)


def test_reactivation_restores_login(factory: Factory) -> None:
    service = factory.container.user_service
    admin = factory.admin()
    learner = factory.learner()
    service.set_active(learner.id, False, admin)

    restored = service.set_active(learner.id, True, admin)

    assert restored.is_active
    assert service.authenticate(learner.email, "password") is not None


def test_delete_user(factory: Factory) -> None:
    service = factory.container.user_service
    learner = factory.learner()
    session = factory.session(factory.teacher(), factory.at(hour=10))
    factory.container.session_service.book(session.id, learner)

    service.delete_user(learner.id, factory.admin())

    with pytest.raises(NotFoundError):
        service.get_user(learner.id)
    released = factory.container.session_service.get_session(session.id)
    assert released.status == SessionStatus.AVAILABLE


def test_set_active_requires_admin(factory: Factory) -> None:
    learner = factory.learner()

    with pytest.raises(AuthorizationError):
        factory.container.user_service.set_active(
            learner.id, False, factory.teacher()
        )
