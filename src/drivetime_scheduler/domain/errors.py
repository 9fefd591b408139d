"""Typed failures raised by the scheduling services.

Every error is raised before any state is written, so callers can surface
``message`` verbatim and assume nothing changed.
"""


class SchedulerError(Exception):
    """Base class for business-rule rejections."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


class ValidationError(SchedulerError):
    """Missing or malformed input."""


class AuthorizationError(SchedulerError):
    """The acting user's role does not permit the action."""


class NotFoundError(SchedulerError):
    """A referenced session, user or vehicle does not exist."""


class ConflictError(SchedulerError):
    """The action collides with existing state."""


class LimitExceededError(SchedulerError):
    """A teacher-configured booking limit would be exceeded."""

    def __init__(self, message: str, kind: str) -> None:
        super().__init__(message)
        self.kind = kind


class TemporalError(SchedulerError):
    """A start time in the past or an interval that is too short."""
