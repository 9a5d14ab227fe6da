"""Activity routes for browsing, creating and joining activities."""
from fastapi import APIRouter, Depends

from unalon.routes.deps import get_activity_service, get_current_user_id
from unalon.schemas import (
    ActivityCreate,
    ActivityDetail,
    ActivityRequestRead,
    ActivityWithHost,
    MyPlans,
)
from unalon.services.activities import ActivityService

router = APIRouter(prefix="/api", tags=["activities"])


@router.get("/activities", response_model=list[ActivityDetail])
async def list_activities(
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """
    List all activities, soonest first.

    Each activity carries its host, its participants and whether the
    current user has ever filed a join request for it.
    """
    return activities.list_activities(viewer_id=user_id)


@router.get("/activities/hosted", response_model=list[ActivityWithHost])
async def list_hosted(
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """Activities hosted by the current user, soonest first."""
    return activities.list_hosted(user_id)


@router.get("/activities/{activity_id}",response_model=ActivityDetail)
async def get_activity(
    activity_id: str,
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """Single activity with host, participants and request flag. 404 if unknown."""
    return activities.get_activity(activity_id, viewer_id=user_id)


@router.post("/activities", response_model=ActivityWithHost)
async def create_activity(
    body: ActivityCreate,
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """Create an activity hosted by the current user."""
    return activities.create_activity(user_id, body)


@router.post("/activities/{activity_id}/request", response_model=ActivityRequestRead)
async def request_to_join(
    activity_id: str,
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """
    Ask to join an activity.

    Returns 404 for an unknown activity, and 400 when the user already
    participates, already has a pending request, or the activity is full.
    """
    return activities.request_to_join(activity_id, user_id)


@router.get("/activities/{activity_id}/requests", response_model=list[ActivityRequestRead])
async def list_requests(
    activity_id: str,
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """Join requests for an activity. Only its host may see them (403 otherwise)."""
    return activities.list_requests(activity_id, acting_user_id=user_id)


@router.get("/my-plans", response_model=MyPlans)
async def my_plans(
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """Activities the user hosts or participates in, split into upcoming and past."""
    return activities.list_my_plans(user_id)
