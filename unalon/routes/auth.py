"""Login, registration, logout and the current user's profile."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from unalon.core.config import settings
from unalon.models import UserUpdate
from unalon.routes.deps import (
    get_account_service,
    get_current_user_id,
    get_session_token,
    get_sessions,
)
from unalon.schemas import LoginRequest, StatusMessage, UserCreate, UserEnvelope, UserRead
from unalon.services.accounts import AccountService
from unalon.services.sessions import SessionStore

router = APIRouter(prefix="/api", tags=["auth"])


def session_response(user: UserRead, sessions: SessionStore) -> JSONResponse:
    """Open a session for the user and return it in a cookie."""
    token = sessions.create(user.id)
    response = JSONResponse(UserEnvelope(user=user).model_dump(mode="json", by_alias=True))
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=settings.session_ttl_hours * 60 * 60,
        path="/",
    )
    return response


@router.post("/login", response_model=UserEnvelope)
async def login(
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
    sessions: SessionStore = Depends(get_sessions),
):
    """
    Log in by email.

    There is no password check; the password is required in the body but
    otherwise ignored. Returns 401 when no user has the email.
    """
    user = accounts.login(body.email)
    return session_response(user, sessions)


@router.post("/register", response_model=UserEnvelope)
async def register(
    body: UserCreate,
    accounts: AccountService = Depends(get_account_service),
    sessions: SessionStore = Depends(get_sessions),
):
    """Create an account and log it in. Returns 400 if the email is taken."""
    user = accounts.register(body)
    return session_response(user, sessions)


@router.post("/logout", response_model=StatusMessage)
async def logout(
    token: str | None = Depends(get_session_token),
    sessions: SessionStore = Depends(get_sessions),
):
    """Destroy the session, if any, and clear the cookie."""
    sessions.destroy(token)
    response = JSONResponse({"message": "Logged out successfully"})
    response.delete_cookie(settings.session_cookie_name, path="/")
    return response


@router.get("/me", response_model=UserEnvelope)
async def me(
    user_id: str = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    return UserEnvelope(user=accounts.get_user(user_id))


@router.patch("/me", response_model=UserEnvelope)
async def update_me(
    patch: UserUpdate,
    user_id: str = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    """Update profile fields. Unknown fields are rejected with 400."""
    return UserEnvelope(user=accounts.update_profile(user_id, patch))
