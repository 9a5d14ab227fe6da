"""Unalon activity coordination API."""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from unalon.core.config import settings
from unalon.core.errors import install_error_handlers
from unalon.core.scheduler import shutdown_scheduler, start_scheduler
from unalon.core.store import EntityStore
from unalon.routes import activities, auth, messages, requests
from unalon.services.accounts import AccountService
from unalon.services.activities import ActivityService
from unalon.services.messaging import MessagingService
from unalon.services.sessions import SessionStore

# Configure logging
log_dir = Path(settings.log_dir).expanduser()
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Unalon application")
    scheduler = start_scheduler(app.state.sessions)
    yield
    shutdown_scheduler(scheduler)
    logger.info("Unalon application shut down")


def create_app(store: EntityStore | None = None, seed: bool | None = None) -> FastAPI:
    """
    Build the application around an entity store.

    A fresh in-memory store is created when none is given. The store's
    tables are created immediately; demo fixtures are loaded when ``seed``
    (default: the ``seed_demo_data`` setting) is true.
    """
    if store is None:
        store = EntityStore(settings.database_url, echo=settings.debug)
    store.init(seed=settings.seed_demo_data if seed is None else seed)

    app = FastAPI(
        title=settings.app_name,
        description="Create local activities, request to join them and chat with hosts",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.store = store
    app.state.sessions = SessionStore(ttl=timedelta(hours=settings.session_ttl_hours))
    app.state.accounts = AccountService(store)
    app.state.activities = ActivityService(store)
    app.state.messaging = MessagingService(store)

    # Configure CORS for external access
    origins = (
        ["*"]
        if settings.allowed_origins == "*"
        else [o.strip() for o in settings.allowed_origins.split(",")]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(activities.router)
    app.include_router(requests.router)
    app.include_router(messages.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    return app


app = create_app()
