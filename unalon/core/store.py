"""Entity store backed by an in-memory SQLite database.

The store is the single owner of every User, Activity, ActivityRequest and
Message. Services receive a store instance explicitly and talk to it only
through the primitives below; every read hands back a detached copy, so a
caller mutating an entity never changes stored state without ``update``.

SQLite Configuration Choices:
    - **StaticPool + check_same_thread=False**: an in-memory database lives
      inside one connection, so the pool must hand the same connection to
      every thread. Access to it is serialised by the store lock.

    - **Foreign Keys**: disabled by default in SQLite. Enabled so that a
      request or message can never reference a missing user or activity.

Concurrency:
    Each primitive holds the store lock only for its own duration. Callers
    that need a read-check-write sequence on one entity (capacity checks on
    an activity) take ``lock_for(kind, id)`` around the whole sequence.
"""

import logging
import threading
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy import event as sa_event
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine, select
from sqlmodel.pool import StaticPool

from unalon.core.errors import ConflictError, ValidationError
from unalon.models import (
    Activity,
    ActivityRequest,
    ActivityRequestUpdate,
    ActivityUpdate,
    Message,
    MessageUpdate,
    User,
    UserUpdate,
)

logger = logging.getLogger(__name__)

# The only patch type accepted by ``update`` for each entity kind.
PATCH_TYPES: dict[type[SQLModel], type[BaseModel]] = {
    User: UserUpdate,
    Activity: ActivityUpdate,
    ActivityRequest: ActivityRequestUpdate,
    Message: MessageUpdate,
}

# Column that receives the server clock on insert.
CREATION_FIELDS: dict[type[SQLModel], str] = {
    User: "created_at",
    Activity: "created_at",
    ActivityRequest: "created_at",
    Message: "timestamp",
}


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enforce foreign keys on each new connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class EntityStore:
    """Keyed collections for the four entity kinds."""

    def __init__(self, database_url: str = "sqlite://", echo: bool = False):
        self.engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
        sa_event.listen(self.engine, "connect", set_sqlite_pragma)
        self._lock = threading.RLock()
        self._entity_locks: dict[tuple[str, str], threading.Lock] = {}
        self._entity_locks_guard = threading.Lock()
        self._last_stamp: datetime | None = None

    def init(self, seed: bool = False) -> None:
        """Create all tables, optionally loading the demo fixtures."""
        SQLModel.metadata.create_all(self.engine)
        if seed:
            from unalon.core.seed import seed_demo_data

            seed_demo_data(self)

    def dispose(self) -> None:
        self.engine.dispose()

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def now(self) -> datetime:
        """Server clock, strictly increasing across calls."""
        with self._lock:
            stamp = datetime.now(UTC)
            if self._last_stamp is not None and stamp <= self._last_stamp:
                stamp = self._last_stamp + timedelta(microseconds=1)
            self._last_stamp = stamp
            return stamp

    def get(self, kind: type[SQLModel], entity_id: str) -> SQLModel | None:
        with self._lock, self._session() as session:
            return session.get(kind, entity_id)

    def find_by(self, kind: type[SQLModel], field: str, value) -> SQLModel | None:
        column = self._column(kind, field)
        with self._lock, self._session() as session:
            return session.exec(select(kind).where(column == value)).first()

    def list(self, kind: type[SQLModel], *criteria, order_by=None) -> list[SQLModel]:
        statement = select(kind)
        if criteria:
            statement = statement.where(*criteria)
        if order_by is not None:
            statement = statement.order_by(order_by)
        with self._lock, self._session() as session:
            return list(session.exec(statement).all())

    def insert(self, kind: type[SQLModel], entity: SQLModel) -> SQLModel:
        """Store a new entity, assigning its id and creation time when unset.

        Raises ConflictError on a uniqueness violation and ValidationError
        when a foreign key does not resolve.
        """
        if not isinstance(entity, kind):
            raise ValidationError(f"Expected {kind.__name__}, got {type(entity).__name__}")

        with self._lock, self._session() as session:
            if entity.id is None:
                entity.id = str(uuid4())
            stamp_field = CREATION_FIELDS[kind]
            if getattr(entity, stamp_field) is None:
                setattr(entity, stamp_field, self.now())

            session.add(entity)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                reason = str(e.orig)
                logger.warning(f"Rejected {kind.__name__} insert: {reason}")
                if "UNIQUE" in reason:
                    raise ConflictError(f"{kind.__name__} already exists") from e
                raise ValidationError(f"{kind.__name__} references a missing entity") from e
            session.refresh(entity)
            return entity

    def update(self, kind: type[SQLModel], entity_id: str, patch: BaseModel) -> SQLModel | None:
        """Apply the fields set on ``patch``; None if the id is unknown."""
        patch_type = PATCH_TYPES[kind]
        if not isinstance(patch, patch_type):
            raise ValidationError(f"{kind.__name__} updates require {patch_type.__name__}")

        with self._lock, self._session() as session:
            entity = session.get(kind, entity_id)
            if entity is None:
                return None
            entity.sqlmodel_update(patch.model_dump(exclude_unset=True))
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_where(self, kind: type[SQLModel], patch: BaseModel, *criteria) -> int:
        """Patch every entity matching ``criteria`` in one transaction.

        Returns the number of entities changed.
        """
        patch_type = PATCH_TYPES[kind]
        if not isinstance(patch, patch_type):
            raise ValidationError(f"{kind.__name__} updates require {patch_type.__name__}")
        changes = patch.model_dump(exclude_unset=True)

        statement = select(kind)
        if criteria:
            statement = statement.where(*criteria)
        with self._lock, self._session() as session:
            matched = session.exec(statement).all()
            for entity in matched:
                entity.sqlmodel_update(changes)
                session.add(entity)
            session.commit()
            return len(matched)

    def lock_for(self, kind: type[SQLModel], entity_id: str) -> threading.Lock:
        """Lock guarding read-check-write sequences on a single entity.

        The same id always yields the same lock, even while nobody holds
        it. Locks are never evicted; there is one per entity that was ever
        locked, and entities are never deleted.
        """
        key = (kind.__name__, entity_id)
        with self._entity_locks_guard:
            lock = self._entity_locks.get(key)
            if lock is None:
                lock = self._entity_locks[key] = threading.Lock()
            return lock

    @staticmethod
    def _column(kind: type[SQLModel], field: str):
        if field not in kind.model_fields:
            raise ValidationError(f"{kind.__name__} has no field {field!r}")
        return getattr(kind, field)
