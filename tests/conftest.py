"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from unalon.core.store import EntityStore
from unalon.main import create_app
from unalon.models import Activity, User
from unalon.services.activities import ActivityService
from unalon.services.messaging import MessagingService
from unalon.services.requests import ParticipationStateMachine


@pytest.fixture(name="store")
def store_fixture():
    """Create a fresh in-memory store for each test."""
    store = EntityStore()
    store.init()
    yield store
    store.dispose()


def make_user(store: EntityStore, username: str) -> User:
    return store.insert(User, User(
        username=username,
        email=f"{username}@example.com",
        name=username.capitalize(),
    ))


@pytest.fixture(name="user_factory")
def user_factory_fixture(store: EntityStore):
    """Factory creating users by username."""

    def _make(username: str) -> User:
        return make_user(store, username)

    return _make


@pytest.fixture(name="host")
def host_fixture(store: EntityStore) -> User:
    return make_user(store, "hana")


@pytest.fixture(name="alice")
def alice_fixture(store: EntityStore) -> User:
    return make_user(store, "alice")


@pytest.fixture(name="bob")
def bob_fixture(store: EntityStore) -> User:
    return make_user(store, "bob")


@pytest.fixture(name="activities")
def activity_service_fixture(store: EntityStore) -> ActivityService:
    return ActivityService(store)


@pytest.fixture(name="messaging")
def messaging_service_fixture(store: EntityStore) -> MessagingService:
    return MessagingService(store)


@pytest.fixture(name="machine")
def state_machine_fixture(store: EntityStore) -> ParticipationStateMachine:
    return ParticipationStateMachine(store)


@pytest.fixture(name="sample_activity")
def sample_activity_fixture(store: EntityStore, host: User) -> Activity:
    """An upcoming activity with three free seats and no participants."""
    return store.insert(Activity, Activity(
        title="Board Game Night",
        description="Strategy games and snacks",
        host_id=host.id,
        location="Community Center",
        datetime=datetime.now(UTC) + timedelta(hours=3),
        duration="3 hours",
        max_participants=3,
        vibes=["Social", "Fun"],
    ))


@pytest.fixture(name="single_seat_activity")
def single_seat_activity_fixture(store: EntityStore, host: User) -> Activity:
    return store.insert(Activity, Activity(
        title="Coffee & Conversation",
        description="One seat at the table",
        host_id=host.id,
        location="Blue Bottle Coffee",
        datetime=datetime.now(UTC) + timedelta(days=1),
        duration="1.5 hours",
        max_participants=1,
    ))


@pytest.fixture(name="app")
def app_fixture(store: EntityStore):
    """Application bound to the test store, without demo data."""
    return create_app(store=store, seed=False)


@pytest.fixture(name="anon_client")
def anon_client_fixture(app) -> TestClient:
    return TestClient(app)


@pytest.fixture(name="login")
def login_fixture(app):
    """Factory returning a TestClient logged in as the given user."""

    def _login(user: User) -> TestClient:
        client = TestClient(app)
        response = client.post(
            "/api/login", json={"email": user.email, "password": "anything"}
        )
        assert response.status_code == 200
        return client

    return _login


@pytest.fixture(name="client")
def client_fixture(login, alice: User) -> TestClient:
    """A client logged in as alice."""
    return login(alice)
