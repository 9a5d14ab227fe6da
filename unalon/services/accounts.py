"""Registration, email login and user lookup."""
import logging

from unalon.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from unalon.core.store import EntityStore
from unalon.models import User, UserUpdate
from unalon.schemas import UserCreate, UserRead

logger = logging.getLogger(__name__)


class AccountService:
    """User accounts. Login is an email lookup; no password is checked."""

    def __init__(self, store: EntityStore):
        self.store = store

    def register(self, data: UserCreate) -> UserRead:
        """
        Create a user from the registration form.

        Fails with ConflictError when the email or username is taken. The
        reputation score starts at 0 regardless of input.
        """
        if self.store.find_by(User, "email", data.email) is not None:
            raise ConflictError("User already exists")
        if self.store.find_by(User, "username", data.username) is not None:
            raise ConflictError("Username already taken")

        user = self.store.insert(User, User(
            username=data.username,
            email=data.email,
            name=data.name,
            age=data.age,
            location=data.location,
            avatar=data.avatar,
            interests=list(data.interests),
            favorite_quote=data.favorite_quote,
        ))
        logger.info(f"Registered user {user.id} ({user.username})")
        return UserRead.model_validate(user)

    def login(self, email: str) -> UserRead:
        user = self.store.find_by(User, "email", email)
        if user is None:
            logger.warning(f"Login failed for unknown email {email}")
            raise UnauthorizedError("Invalid credentials")
        return UserRead.model_validate(user)

    def get_user(self, user_id: str) -> UserRead:
        user = self.store.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)

    def update_profile(self, user_id: str, patch: UserUpdate) -> UserRead:
        """Apply profile changes; only the fields on UserUpdate are accepted."""
        if "name" in patch.model_fields_set and not (patch.name or "").strip():
            raise ValidationError("Name cannot be empty")
        if "interests" in patch.model_fields_set and patch.interests is None:
            raise ValidationError("Interests must be a list")
        user = self.store.update(User, user_id, patch)
        if user is None:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)
