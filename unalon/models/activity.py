"""Activity model for hostable, joinable events.

This module defines the Activity table model which represents a local event
that a host creates and other users request to join. The participant list
is maintained by the server: it starts empty and only grows through the
acceptance of join requests.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel

from unalon.models.base import json_list_column, utc_column


class Activity(SQLModel, table=True):
    """An event with a bounded number of seats.

    The host is implicitly attending and is never part of ``participant_ids``.
    The store keeps ``current_participants == len(participant_ids)`` and
    ``len(participant_ids) <= max_participants`` at all times.

    Attributes:
        id: Opaque identifier assigned by the store.
        title: Short headline.
        description: Longer free-form text.
        host_id: Foreign key to the hosting User.
        location: Where the activity takes place.
        datetime: When the activity starts (UTC).
        duration: Human-readable duration, e.g. "2 hours".
        max_participants: Seat count, excluding the host.
        current_participants: Number of accepted participants.
        vibes: Ordered list of mood tags.
        participant_ids: Accepted participants in join order.
        image: Optional cover image URL.
        created_at: When the activity was created.
    """
    id: str | None = Field(default=None, primary_key=True)
    title: str
    description: str
    host_id: str = Field(foreign_key="user.id", index=True)
    location: str
    datetime: dt.datetime = Field(sa_column=utc_column(index=True))
    duration: str
    max_participants: int
    current_participants: int = Field(default=0)
    vibes: list[str] = Field(default_factory=list, sa_column=json_list_column())
    participant_ids: list[str] = Field(default_factory=list, sa_column=json_list_column())
    image: str | None = None
    created_at: dt.datetime | None = Field(default=None, sa_column=utc_column())

    def has_member(self, user_id: str) -> bool:
        """True if the user is the host or an accepted participant."""
        return user_id == self.host_id or user_id in self.participant_ids

    @property
    def is_full(self) -> bool:
        return self.current_participants >= self.max_participants


class ActivityUpdate(BaseModel):
    """Fields the acceptance path may change."""
    model_config = ConfigDict(extra="forbid")

    participant_ids: list[str] | None = None
    current_participants: int | None = None
