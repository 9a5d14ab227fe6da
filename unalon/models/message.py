"""Direct message model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from sqlmodel import Field, SQLModel

from unalon.models.base import utc_column


class Message(SQLModel, table=True):
    """A message from one user to another.

    Messages are never edited or deleted; only ``is_read`` changes, when the
    receiver opens the thread with the sender.

    Attributes:
        id: Opaque identifier assigned by the store.
        sender_id: Foreign key to the sending User.
        receiver_id: Foreign key to the receiving User.
        content: Message text, never empty.
        timestamp: Server-assigned, strictly increasing in creation order.
        is_read: Whether the receiver has fetched the thread since.
    """
    id: str | None = Field(default=None, primary_key=True)
    sender_id: str = Field(foreign_key="user.id", index=True)
    receiver_id: str = Field(foreign_key="user.id", index=True)
    content: str
    timestamp: datetime | None = Field(default=None, sa_column=utc_column(index=True))
    is_read: bool = Field(default=False)


class MessageUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    is_read: bool | None = None
