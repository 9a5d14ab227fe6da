"""Join request model.

An ActivityRequest records a user's application to join an activity. It is
created pending and resolved exactly once, by the host, to accepted or
rejected.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel

from unalon.models.base import utc_column


class RequestStatus(str, Enum):
    """Lifecycle states of a join request."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ActivityRequest(SQLModel, table=True):
    """A user's application to join an activity.

    Attributes:
        id: Opaque identifier assigned by the store.
        activity_id: Foreign key to the Activity being joined.
        user_id: Foreign key to the requesting User.
        status: One of "pending", "accepted" or "rejected". Terminal once
            it leaves "pending".
        created_at: When the request was filed.
    """
    id: str | None = Field(default=None, primary_key=True)
    activity_id: str = Field(foreign_key="activity.id", index=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    status: RequestStatus = Field(default=RequestStatus.PENDING)
    created_at: datetime | None = Field(default=None, sa_column=utc_column())


class ActivityRequestUpdate(BaseModel):
    """The only mutable field of a request."""
    model_config = ConfigDict(extra="forbid")

    status: RequestStatus | None = None
