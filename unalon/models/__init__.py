from unalon.models.activity import Activity, ActivityUpdate
from unalon.models.activity_request import ActivityRequest, ActivityRequestUpdate, RequestStatus
from unalon.models.message import Message, MessageUpdate
from unalon.models.user import User, UserUpdate

__all__ = [
    "User",
    "UserUpdate",
    "Activity",
    "ActivityUpdate",
    "ActivityRequest",
    "ActivityRequestUpdate",
    "RequestStatus",
    "Message",
    "MessageUpdate",
]
