"""Request dependencies: services bound to the app's store, and the session gate."""
from fastapi import Depends, Request

from unalon.core.config import settings
from unalon.core.errors import UnauthorizedError
from unalon.services.accounts import AccountService
from unalon.services.activities import ActivityService
from unalon.services.messaging import MessagingService
from unalon.services.sessions import SessionStore


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_account_service(request: Request) -> AccountService:
    return request.app.state.accounts


def get_activity_service(request: Request) -> ActivityService:
    return request.app.state.activities


def get_messaging_service(request: Request) -> MessagingService:
    return request.app.state.messaging


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(settings.session_cookie_name)


def get_current_user_id(
    token: str | None = Depends(get_session_token),
    sessions: SessionStore = Depends(get_sessions),
) -> str:
    """
    Resolve the caller from the session cookie.

    Raises UnauthorizedError (401) when there is no cookie or the session is
    unknown or expired.
    """
    user_id = sessions.resolve(token)
    if user_id is None:
        raise UnauthorizedError()
    return user_id
