"""JSON views of domain records."""

from drivetime_scheduler.domain.audit import AuditLogEntry
from drivetime_scheduler.domain.booking import ScoredSession
from drivetime_scheduler.domain.notifications import Notification
from drivetime_scheduler.domain.sessions import Session
from drivetime_scheduler.domain.users import User
from drivetime_scheduler.domain.vehicles import Vehicle


def serialize_user(user: User) -> dict[str, object]:
    """Public view of a user; the password hash never leaves the service."""
    constraints = user.teacher_constraints
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "is_active": user.is_active,
        "registered_at": user.registered_at.isoformat(),
        "teacher_constraints": {
            "max_sessions_per_learner_daily": (
                constraints.max_sessions_per_learner_daily
            ),
            "max_sessions_per_learner_weekly": (
                constraints.max_sessions_per_learner_weekly
            ),
        },
    }


def serialize_vehicle(vehicle: Vehicle) -> dict[str, object]:
    return {
        "id": str(vehicle.id),
        "name": vehicle.name,
        "plate": vehicle.plate,
        "status": vehicle.status.value,
    }


def serialize_session(session: Session) -> dict[str, object]:
    return {
        "id": str(session.id),
        "teacher_id": str(session.teacher_id),
        "teacher_name": session.teacher_name,
        "learner_ids": [str(learner_id) for learner_id in session.learner_ids],
        "learner_names": list(session.learner_names),
        "start": session.start.isoformat(),
        "end": session.end.isoformat(),
        "status": session.status.value,
        "created_at": session.created_at.isoformat(),
        "cancellation_reason": session.cancellation_reason,
        "requires_vehicle": session.requires_vehicle,
        "vehicle_id": str(session.vehicle_id) if session.vehicle_id else None,
        "type": session.type.value,
        "capacity": session.capacity,
    }


def serialize_scored(item: ScoredSession) -> dict[str, object]:
    return {
        **serialize_session(item.session),
        "score": round(item.score, 2),
        "match_reasons": list(item.match_reasons),
    }


def serialize_log(entry: AuditLogEntry) -> dict[str, object]:
    metadata = None
    if entry.metadata is not None:
        meta = entry.metadata
        metadata = {
            "old_start": meta.old_start.isoformat() if meta.old_start else None,
            "new_start": meta.new_start.isoformat() if meta.new_start else None,
            "old_vehicle": meta.old_vehicle,
            "new_vehicle": meta.new_vehicle,
            "reason": meta.reason,
        }
    return {
        "id": str(entry.id),
        "session_id": str(entry.session_id),
        "action": entry.action.value,
        "timestamp": entry.timestamp.isoformat(),
        "actor_name": entry.actor_name,
        "details": entry.details,
        "metadata": metadata,
    }


def serialize_notification(notification: Notification) -> dict[str, object]:
    return {
        "id": str(notification.id),
        "message": notification.message,
        "read": notification.read,
        "timestamp": notification.timestamp.isoformat(),
    }
