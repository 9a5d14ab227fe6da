"""Join request lifecycle and its effect on an activity's participant list.

A request starts ``pending`` and is resolved exactly once:

    pending -> accepted   (the requester is appended to participant_ids)
    pending -> rejected   (no change to the activity)

Both the filing of a request and its acceptance read the activity, check
capacity and then write. Each of those sequences runs under the store's
per-activity lock, so concurrent accepts on the last free seat cannot both
succeed. Different activities never contend.
"""
import logging

from unalon.core.errors import (
    CapacityError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from unalon.core.store import EntityStore
from unalon.models import (
    Activity,
    ActivityRequest,
    ActivityRequestUpdate,
    ActivityUpdate,
    RequestStatus,
    User,
)
from unalon.schemas import ActivityRequestRead

logger = logging.getLogger(__name__)

TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.ACCEPTED, RequestStatus.REJECTED}),
    RequestStatus.ACCEPTED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    return target in TRANSITIONS[current]


class ParticipationStateMachine:
    """Files and resolves join requests against an entity store."""

    def __init__(self, store: EntityStore):
        self.store = store

    def file_request(self, activity_id: str, user_id: str) -> ActivityRequestRead:
        """
        Create a pending request for ``user_id`` to join ``activity_id``.

        Fails with NotFoundError for an unknown activity or user,
        ConflictError when the user is the host, already a participant or
        already has a pending request, and CapacityError when every seat is
        taken. A rejected request does not block filing a new one.
        """
        if self.store.get(Activity, activity_id) is None:
            raise NotFoundError("Activity not found")
        if self.store.get(User, user_id) is None:
            raise NotFoundError("User not found")

        with self.store.lock_for(Activity, activity_id):
            activity = self.store.get(Activity, activity_id)

            if activity.has_member(user_id):
                raise ConflictError("Already participating in this activity")
            if activity.is_full:
                raise CapacityError("Activity is full")

            pending = self.store.list(
                ActivityRequest,
                ActivityRequest.activity_id == activity_id,
                ActivityRequest.user_id == user_id,
                ActivityRequest.status == RequestStatus.PENDING,
            )
            if pending:
                raise ConflictError("Request already pending")

            request = self.store.insert(
                ActivityRequest,
                ActivityRequest(activity_id=activity_id, user_id=user_id),
            )

        logger.info(f"User {user_id} requested to join activity {activity_id} ({request.id})")
        return ActivityRequestRead.model_validate(request)

    def resolve(
        self,
        request_id: str,
        decision: RequestStatus,
        acting_user_id: str | None = None,
    ) -> ActivityRequestRead:
        """
        Accept or reject a pending request.

        Acceptance re-checks capacity at the moment of acceptance. If the
        activity filled up in the meantime, CapacityError is raised and the
        request stays pending. When ``acting_user_id`` is given it must be
        the activity's host.
        """
        if decision not in (RequestStatus.ACCEPTED, RequestStatus.REJECTED):
            raise ValidationError("Decision must be accepted or rejected")

        request = self.store.get(ActivityRequest, request_id)
        if request is None:
            raise NotFoundError("Request not found")

        activity_id = request.activity_id
        with self.store.lock_for(Activity, activity_id):
            activity = self.store.get(Activity, activity_id)
            if activity is None:
                raise NotFoundError("Activity not found")
            if acting_user_id is not None and acting_user_id != activity.host_id:
                raise ForbiddenError("Only the host can resolve join requests")

            # Re-read under the lock; a concurrent resolve may have won.
            request = self.store.get(ActivityRequest, request_id)
            if not can_transition(request.status, decision):
                raise InvalidStateError(f"Request is already {request.status.value}")

            if decision == RequestStatus.ACCEPTED:
                self._admit(activity, request.user_id)

            request = self.store.update(
                ActivityRequest, request_id, ActivityRequestUpdate(status=decision)
            )

        logger.info(f"Request {request_id} for activity {activity_id} {decision.value}")
        return ActivityRequestRead.model_validate(request)

    def _admit(self, activity: Activity, user_id: str) -> None:
        """Append a participant. Caller holds the activity lock."""
        if activity.has_member(user_id):
            raise ConflictError("Already participating in this activity")
        if activity.is_full:
            logger.warning(f"Activity {activity.id} is full, cannot admit {user_id}")
            raise CapacityError("Activity is full")

        participant_ids = [*activity.participant_ids, user_id]
        self.store.update(Activity, activity.id, ActivityUpdate(
            participant_ids=participant_ids,
            current_participants=len(participant_ids),
        ))
