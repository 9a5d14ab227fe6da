"""Host-side resolution of join requests."""
from fastapi import APIRouter, Depends

from unalon.routes.deps import get_activity_service, get_current_user_id
from unalon.schemas import ActivityRequestRead, ResolveRequestBody
from unalon.services.activities import ActivityService

router = APIRouter(prefix="/api/requests", tags=["requests"])


@router.post("/{request_id}/resolve", response_model=ActivityRequestRead)
async def resolve_request(
    request_id: str,
    body: ResolveRequestBody,
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """
    Accept or reject a pending join request.

    Only the activity's host may resolve. Accepting adds the requester to
    the participant list, or fails with 400 if the activity filled up in the
    meantime (the request then stays pending). Resolving a request that is
    no longer pending returns 409.
    """
    return activities.resolve_request(request_id, body.decision, acting_user_id=user_id)
