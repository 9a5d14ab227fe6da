"""Request and response bodies of the JSON API.

Field names are snake_case in Python and camelCase on the wire. Read schemas
whitelist the public fields of each entity; they are what services hand back
to callers, so nothing else about a stored row can reach a response.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from unalon.models import RequestStatus


class APIModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Users

class UserRead(APIModel):
    """Public profile of a user."""
    id: str
    username: str
    email: str
    name: str
    age: int | None = None
    location: str | None = None
    avatar: str | None = None
    unalon_score: int = 0
    interests: list[str] = []
    favorite_quote: str | None = None
    created_at: dt.datetime | None = None


class UserCreate(APIModel):
    """Registration form. A password may be sent but is never stored."""
    username: str = Field(min_length=1)
    email: EmailStr
    name: str = Field(min_length=1)
    age: int | None = None
    location: str | None = None
    avatar: str | None = None
    interests: list[str] = []
    favorite_quote: str | None = None
    password: str | None = Field(default=None, exclude=True)


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserEnvelope(APIModel):
    user: UserRead


# Activities

class ActivityCreate(APIModel):
    """Fields a host supplies; the host id comes from the session."""
    title: str
    description: str
    location: str
    datetime: dt.datetime
    duration: str
    max_participants: int
    vibes: list[str] = []
    image: str | None = None


class ActivityRead(APIModel):
    id: str
    title: str
    description: str
    host_id: str
    location: str
    datetime: dt.datetime
    duration: str
    max_participants: int
    current_participants: int
    vibes: list[str] = []
    participant_ids: list[str] = []
    image: str | None = None
    created_at: dt.datetime | None = None


class ActivityWithHost(ActivityRead):
    host: UserRead | None = None


class ActivityDetail(ActivityWithHost):
    """An activity with its people resolved and the viewer's request flag."""
    participants: list[UserRead] = []
    user_requested: bool = False


class MyPlans(APIModel):
    upcoming: list[ActivityWithHost] = []
    past: list[ActivityWithHost] = []


# Join requests

class ActivityRequestRead(APIModel):
    id: str
    activity_id: str
    user_id: str
    status: RequestStatus
    created_at: dt.datetime | None = None


class ResolveRequestBody(APIModel):
    decision: RequestStatus


# Messages

class MessageCreate(APIModel):
    receiver_id: str
    content: str


class MessageRead(APIModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    timestamp: dt.datetime
    is_read: bool


class ConversationRead(APIModel):
    """Summary of all messages exchanged with one counterpart."""
    user: UserRead
    last_message: MessageRead
    unread_count: int


class StatusMessage(APIModel):
    message: str
