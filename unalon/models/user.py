"""User model for people who host and join activities.

This module defines the User table model and its explicit update type.
Users are created at registration and never deleted; the reputation score
and creation timestamp are assigned by the server.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel

from unalon.models.base import json_list_column, utc_column


class User(SQLModel, table=True):
    """A registered person.

    Attributes:
        id: Opaque identifier assigned by the store (UUID text).
        username: Public handle, unique across users.
        email: Login identity, unique across users.
        name: Display name.
        age: Optional age in years.
        location: Free-form home location.
        avatar: URL of the profile picture.
        unalon_score: Reputation integer supplied from outside this core.
            Always 0 for newly registered users.
        interests: Ordered list of interest tags.
        favorite_quote: Optional profile quote.
        created_at: When the user registered.
    """
    id: str | None = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    name: str
    age: int | None = None
    location: str | None = None
    avatar: str | None = None
    unalon_score: int = Field(default=0)
    interests: list[str] = Field(default_factory=list, sa_column=json_list_column())
    favorite_quote: str | None = None
    created_at: datetime | None = Field(default=None, sa_column=utc_column())


class UserUpdate(BaseModel):
    """Profile fields a user may change after registration.

    Accepts snake_case or camelCase keys; any other key is rejected.
    """
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    age: int | None = None
    location: str | None = None
    avatar: str | None = None
    interests: list[str] | None = None
    favorite_quote: str | None = None
