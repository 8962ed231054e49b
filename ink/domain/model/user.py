"""User profile aggregate root.

Profiles are created on first sign-in and accumulate points through the
point accrual policy. They are never deleted by the engagement service.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ink.domain.model.common import DomainModel, utc_now
from ink.domain.value import Badge, Handle, UserId


class User(DomainModel):
    """User aggregate root."""

    id: UserId
    handle: Handle
    email: Optional[str] = None
    display_name: Optional[str] = None
    points: int = Field(default=0, ge=0)
    public_name: bool = True  # Show display name on public pages
    badge: Optional[Badge] = None
    created_at: datetime = Field(default_factory=utc_now)


class HandleReservation(DomainModel):
    """Claim on a handle, keyed by the handle name without '@'."""

    user_id: UserId
