"""Activity creation, browsing, joining and personal plans."""
import logging
from datetime import UTC, datetime

from unalon.core.errors import ForbiddenError, NotFoundError, ValidationError
from unalon.core.store import EntityStore
from unalon.models import Activity, ActivityRequest, RequestStatus, User
from unalon.models.base import as_utc
from unalon.schemas import (
    ActivityCreate,
    ActivityDetail,
    ActivityRequestRead,
    ActivityWithHost,
    MyPlans,
    UserRead,
)
from unalon.services.requests import ParticipationStateMachine

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ("title", "description", "location", "duration")


class ActivityService:
    """Operations on activities for a given entity store."""

    def __init__(self, store: EntityStore):
        self.store = store
        self.participation = ParticipationStateMachine(store)

    def create_activity(self, host_id: str, data: ActivityCreate) -> ActivityWithHost:
        """
        Create an activity hosted by ``host_id``.

        The participant list starts empty; the host is never counted in it.
        Naive datetimes are taken as UTC.
        """
        missing = [name for name in REQUIRED_TEXT_FIELDS if not getattr(data, name).strip()]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if data.max_participants < 1:
            raise ValidationError("maxParticipants must be at least 1")

        host = self.store.get(User, host_id)
        if host is None:
            raise NotFoundError("User not found")

        activity = self.store.insert(Activity, Activity(
            title=data.title.strip(),
            description=data.description.strip(),
            host_id=host_id,
            location=data.location.strip(),
            datetime=as_utc(data.datetime),
            duration=data.duration.strip(),
            max_participants=data.max_participants,
            current_participants=0,
            vibes=list(data.vibes),
            participant_ids=[],
            image=data.image,
        ))
        logger.info(f"User {host_id} created activity {activity.id} ({activity.title})")
        return ActivityWithHost.model_validate(
            {**activity.model_dump(), "host": UserRead.model_validate(host)}
        )

    def list_activities(self, viewer_id: str | None = None) -> list[ActivityDetail]:
        """All activities by ascending start time, with people resolved."""
        requested = self._requested_activity_ids(viewer_id) if viewer_id else set()
        activities = self.store.list(Activity, order_by=Activity.datetime)
        return [self._detail(a, a.id in requested) for a in activities]

    def get_activity(self, activity_id: str, viewer_id: str | None = None) -> ActivityDetail:
        activity = self.store.get(Activity, activity_id)
        if activity is None:
            raise NotFoundError("Activity not found")
        requested = False
        if viewer_id:
            requested = activity_id in self._requested_activity_ids(viewer_id)
        return self._detail(activity, requested)

    def request_to_join(self, activity_id: str, user_id: str) -> ActivityRequestRead:
        return self.participation.file_request(activity_id, user_id)

    def resolve_request(
        self,
        request_id: str,
        decision: RequestStatus,
        acting_user_id: str | None = None,
    ) -> ActivityRequestRead:
        return self.participation.resolve(request_id, decision, acting_user_id)

    def list_requests(
        self, activity_id: str, acting_user_id: str | None = None
    ) -> list[ActivityRequestRead]:
        """Join requests for an activity in filing order. Host only."""
        activity = self.store.get(Activity, activity_id)
        if activity is None:
            raise NotFoundError("Activity not found")
        if acting_user_id is not None and acting_user_id != activity.host_id:
            raise ForbiddenError("Only the host can view join requests")

        requests = self.store.list(
            ActivityRequest,
            ActivityRequest.activity_id == activity_id,
            order_by=ActivityRequest.created_at,
        )
        return [ActivityRequestRead.model_validate(r) for r in requests]

    def list_hosted(self, host_id: str) -> list[ActivityWithHost]:
        activities = self.store.list(
            Activity, Activity.host_id == host_id, order_by=Activity.datetime
        )
        return [self._with_host(a) for a in activities]

    def list_my_plans(self, user_id: str, now: datetime | None = None) -> MyPlans:
        """
        Split the user's activities into upcoming and past.

        An activity belongs to the user when they host it or were accepted
        into it. Activities starting exactly at ``now`` count as past.
        """
        now = as_utc(now) if now else datetime.now(UTC)
        mine = [
            a for a in self.store.list(Activity, order_by=Activity.datetime)
            if a.has_member(user_id)
        ]
        return MyPlans(
            upcoming=[self._with_host(a) for a in mine if a.datetime > now],
            past=[self._with_host(a) for a in mine if a.datetime <= now],
        )

    def _requested_activity_ids(self, user_id: str) -> set[str]:
        requests = self.store.list(ActivityRequest, ActivityRequest.user_id == user_id)
        return {r.activity_id for r in requests}

    def _resolve_user(self, user_id: str) -> UserRead | None:
        user = self.store.get(User, user_id)
        return UserRead.model_validate(user) if user else None

    def _with_host(self, activity: Activity) -> ActivityWithHost:
        return ActivityWithHost.model_validate(
            {**activity.model_dump(), "host": self._resolve_user(activity.host_id)}
        )

    def _detail(self, activity: Activity, user_requested: bool) -> ActivityDetail:
        participants = []
        for participant_id in activity.participant_ids:
            user = self._resolve_user(participant_id)
            if user is not None:
                participants.append(user)

        return ActivityDetail.model_validate({
            **activity.model_dump(),
            "host": self._resolve_user(activity.host_id),
            "participants": participants,
            "user_requested": user_requested,
        })
