"""Domain models for user notifications."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Notification:
    """A message addressed to a single user."""

    id: UUID
    user_id: UUID
    message: str
    read: bool
    timestamp: datetime
