"""Tests for the activity service."""

from datetime import UTC, datetime, timedelta

import pytest

from unalon.core.errors import (
    CapacityError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from unalon.core.store import EntityStore
from unalon.models import Activity, ActivityRequest, ActivityUpdate, RequestStatus, User
from unalon.schemas import ActivityCreate
from unalon.services.activities import ActivityService


def activity_form(**overrides) -> ActivityCreate:
    fields = {
        "title": "Sunset Run",
        "description": "Easy 5k along the water",
        "location": "Embarcadero",
        "datetime": datetime.now(UTC) + timedelta(days=2),
        "duration": "1 hour",
        "max_participants": 4,
        "vibes": ["Active"],
    }
    fields.update(overrides)
    return ActivityCreate(**fields)


def fill(store: EntityStore, activity: Activity, users: list[User]) -> None:
    ids = [u.id for u in users]
    store.update(Activity, activity.id, ActivityUpdate(
        participant_ids=ids, current_participants=len(ids),
    ))


class TestCreateActivity:
    """Tests for creating activities."""

    def test_create_activity(self, activities: ActivityService, host: User):
        """Test that a new activity starts empty and resolves its host."""
        created = activities.create_activity(host.id, activity_form())

        assert created.host_id == host.id
        assert created.host.username == host.username
        assert created.current_participants == 0
        assert created.participant_ids == []
        assert created.vibes == ["Active"]

    def test_naive_datetime_is_utc(self, activities: ActivityService, host: User):
        created = activities.create_activity(
            host.id, activity_form(datetime=datetime(2031, 5, 1, 18, 30))
        )
        assert created.datetime == datetime(2031, 5, 1, 18, 30, tzinfo=UTC)

    @pytest.mark.parametrize("field", ["title", "description", "location", "duration"])
    def test_blank_text_fields_rejected(self, activities: ActivityService, host: User, field):
        with pytest.raises(ValidationError):
            activities.create_activity(host.id, activity_form(**{field: "   "}))

    @pytest.mark.parametrize("seats", [0, -3])
    def test_max_participants_must_be_positive(self, activities: ActivityService, host: User, seats):
        with pytest.raises(ValidationError):
            activities.create_activity(host.id, activity_form(max_participants=seats))

    def test_unknown_host(self, activities: ActivityService):
        with pytest.raises(NotFoundError):
            activities.create_activity("ghost", activity_form())


class TestListActivities:
    """Tests for browsing activities."""

    def test_ordered_by_datetime(self, activities: ActivityService, host: User):
        now = datetime.now(UTC)
        activities.create_activity(host.id, activity_form(title="C", datetime=now + timedelta(days=3)))
        activities.create_activity(host.id, activity_form(title="A", datetime=now + timedelta(days=1)))
        activities.create_activity(host.id, activity_form(title="B", datetime=now + timedelta(days=2)))

        assert [a.title for a in activities.list_activities()] == ["A", "B", "C"]

    def test_user_requested_flag(
        self, activities: ActivityService, sample_activity: Activity, alice: User, bob: User
    ):
        activities.request_to_join(sample_activity.id, alice.id)

        for_alice = activities.list_activities(viewer_id=alice.id)
        for_bob = activities.list_activities(viewer_id=bob.id)
        anonymous = activities.list_activities()

        assert for_alice[0].user_requested is True
        assert for_bob[0].user_requested is False
        assert anonymous[0].user_requested is False

    def test_rejected_request_still_flags(
        self, activities: ActivityService, store: EntityStore, sample_activity: Activity, alice: User
    ):
        """Any request, whatever its status, sets userRequested."""
        store.insert(ActivityRequest, ActivityRequest(
            activity_id=sample_activity.id, user_id=alice.id, status=RequestStatus.REJECTED,
        ))
        assert activities.get_activity(sample_activity.id, viewer_id=alice.id).user_requested is True

    def test_get_activity_resolves_people(
        self, activities: ActivityService, store: EntityStore, sample_activity: Activity,
        host: User, alice: User, bob: User,
    ):
        fill(store, sample_activity, [bob, alice])

        detail = activities.get_activity(sample_activity.id)
        assert detail.host.id == host.id
        assert [p.id for p in detail.participants] == [bob.id, alice.id]

    def test_get_activity_not_found(self, activities: ActivityService):
        with pytest.raises(NotFoundError):
            activities.get_activity("missing")


class TestRequestToJoin:
    """Tests for filing join requests."""

    def test_creates_pending_request(
        self, activities: ActivityService, store: EntityStore, sample_activity: Activity, alice: User
    ):
        request = activities.request_to_join(sample_activity.id, alice.id)

        assert request.status == RequestStatus.PENDING
        assert request.activity_id == sample_activity.id
        assert request.user_id == alice.id
        # Filing does not take a seat
        assert store.get(Activity, sample_activity.id).current_participants == 0

    def test_unknown_activity(self, activities: ActivityService, alice: User):
        with pytest.raises(NotFoundError):
            activities.request_to_join("missing", alice.id)

    def test_host_cannot_request(
        self, activities: ActivityService, store: EntityStore, sample_activity: Activity, host: User
    ):
        with pytest.raises(ConflictError):
            activities.request_to_join(sample_activity.id, host.id)
        assert store.list(ActivityRequest) == []

    def test_participant_cannot_request(
        self, activities: ActivityService, store: EntityStore, sample_activity: Activity, alice: User
    ):
        fill(store, sample_activity, [alice])
        with pytest.raises(ConflictError):
            activities.request_to_join(sample_activity.id, alice.id)
        assert store.list(ActivityRequest) == []

    def test_full_activity(
        self, activities: ActivityService, store: EntityStore, single_seat_activity: Activity,
        alice: User, bob: User,
    ):
        fill(store, single_seat_activity, [alice])
        with pytest.raises(CapacityError):
            activities.request_to_join(single_seat_activity.id, bob.id)

    def test_duplicate_pending_request(
        self, activities: ActivityService, store: EntityStore, sample_activity: Activity, alice: User
    ):
        activities.request_to_join(sample_activity.id, alice.id)
        with pytest.raises(ConflictError):
            activities.request_to_join(sample_activity.id, alice.id)
        assert len(store.list(ActivityRequest)) == 1

    def test_can_request_again_after_rejection(
        self, activities: ActivityService, sample_activity: Activity, host: User, alice: User
    ):
        first = activities.request_to_join(sample_activity.id, alice.id)
        activities.resolve_request(first.id, RequestStatus.REJECTED, acting_user_id=host.id)

        second = activities.request_to_join(sample_activity.id, alice.id)
        assert second.id != first.id
        assert second.status == RequestStatus.PENDING


class TestJoinScenario:
    """End-to-end flow through request, acceptance and capacity."""

    def test_single_seat_flow(
        self, activities: ActivityService, store: EntityStore, single_seat_activity: Activity,
        host: User, alice: User, bob: User,
    ):
        request = activities.request_to_join(single_seat_activity.id, alice.id)
        assert store.get(Activity, single_seat_activity.id).current_participants == 0

        accepted = activities.resolve_request(request.id, RequestStatus.ACCEPTED, acting_user_id=host.id)
        assert accepted.status == RequestStatus.ACCEPTED

        activity = store.get(Activity, single_seat_activity.id)
        assert activity.participant_ids == [alice.id]
        assert activity.current_participants == 1

        with pytest.raises(CapacityError):
            activities.request_to_join(single_seat_activity.id, bob.id)


class TestHostTools:
    """Tests for host-side listings."""

    def test_list_requests_host_only(
        self, activities: ActivityService, sample_activity: Activity, host: User, alice: User, bob: User
    ):
        activities.request_to_join(sample_activity.id, alice.id)
        activities.request_to_join(sample_activity.id, bob.id)

        listed = activities.list_requests(sample_activity.id, acting_user_id=host.id)
        assert [r.user_id for r in listed] == [alice.id, bob.id]

        with pytest.raises(ForbiddenError):
            activities.list_requests(sample_activity.id, acting_user_id=alice.id)

    def test_list_hosted(self, activities: ActivityService, sample_activity: Activity, host: User, alice: User):
        assert [a.id for a in activities.list_hosted(host.id)] == [sample_activity.id]
        assert activities.list_hosted(alice.id) == []


class TestMyPlans:
    """Tests for the upcoming/past split."""

    def test_partition(
        self, activities: ActivityService, store: EntityStore, host: User, alice: User, bob: User
    ):
        now = datetime.now(UTC)
        past = activities.create_activity(host.id, activity_form(title="Past", datetime=now - timedelta(days=1)))
        soon = activities.create_activity(host.id, activity_form(title="Soon", datetime=now + timedelta(hours=1)))
        joined = activities.create_activity(bob.id, activity_form(title="Joined", datetime=now + timedelta(days=1)))
        activities.create_activity(bob.id, activity_form(title="Other", datetime=now + timedelta(days=2)))

        store.update(Activity, joined.id, ActivityUpdate(participant_ids=[host.id], current_participants=1))

        plans = activities.list_my_plans(host.id, now=now)
        assert [a.title for a in plans.upcoming] == ["Soon", "Joined"]
        assert [a.title for a in plans.past] == ["Past"]
        assert plans.upcoming[1].host.id == bob.id

        assert activities.list_my_plans(alice.id, now=now).upcoming == []
        assert {a.id for a in activities.list_my_plans(host.id, now=now).upcoming} == {soon.id, joined.id}
        assert past.id not in {a.id for a in plans.upcoming}

    def test_starting_now_is_past(self, activities: ActivityService, host: User):
        now = datetime.now(UTC)
        activities.create_activity(host.id, activity_form(datetime=now))

        plans = activities.list_my_plans(host.id, now=now)
        assert plans.upcoming == []
        assert len(plans.past) == 1
