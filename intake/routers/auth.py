"""Login flow endpoints delegating to the identity provider."""

from typing import Annotated
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import RedirectResponse

from intake.auth import CurrentUser, decode_identity_token, upsert_user
from intake.config import get_settings
from intake.database import DbSession
from intake.exceptions import AuthenticationError, ValidationError
from intake.schemas.user import UserRead

router = APIRouter(tags=["auth"])
logger = structlog.get_logger(__name__)


@router.get("/login", summary="Start login")
async def login() -> RedirectResponse:
    """Send the browser to the identity provider."""
    settings = get_settings()
    query = urlencode({"redirect_uri": settings.callback_url})
    return RedirectResponse(f"{settings.identity_login_url}?{query}", status_code=302)


@router.get("/callback", summary="Finish login")
async def callback(
    db: DbSession,
    token: Annotated[str, Query(min_length=1)],
) -> RedirectResponse:
    """Verify the provider token, mirror the user and open a dashboard session."""
    settings = get_settings()
    try:
        claims = decode_identity_token(token)
    except AuthenticationError as e:
        raise ValidationError("Invalid identity token", field="token") from e

    user = await upsert_user(db, claims)
    logger.info("Admin signed in", user_id=user.id)

    response = RedirectResponse("/admin", status_code=302)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.get("/logout", summary="Log out")
async def logout() -> RedirectResponse:
    settings = get_settings()
    response = RedirectResponse(settings.identity_logout_url or "/", status_code=302)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/auth/user", response_model=UserRead, summary="Current user")
async def get_auth_user(user: CurrentUser) -> UserRead:
    return UserRead.model_validate(user)
