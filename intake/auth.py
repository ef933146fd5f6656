"""Authentication against an external identity provider.

The provider signs a JWT for the admin after login and redirects back to
``/api/callback``; the token is then carried in a session cookie (browser)
or an ``Authorization: Bearer`` header (API clients). We only verify the
signature and mirror the user's profile claims into ``users``.
"""

from typing import Annotated

import jwt
import structlog
from fastapi import Depends, Request
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from intake.config import get_settings
from intake.database import DbSession
from intake.exceptions import AuthenticationError
from intake.models.user import User

logger = structlog.get_logger(__name__)


class IdentityClaims(BaseModel):
    """Claims we read from an identity-provider token."""

    sub: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


def decode_identity_token(token: str) -> IdentityClaims:
    """Verify a provider token and return its claims."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"require": ["sub", "exp"], "verify_aud": settings.jwt_audience is not None},
        )
    except jwt.PyJWTError as e:
        raise AuthenticationError("Invalid or expired token") from e
    return IdentityClaims.model_validate(payload)


def extract_token(request: Request) -> str | None:
    """Session cookie first (dashboard), then Bearer header (API)."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def upsert_user(db: AsyncSession, claims: IdentityClaims) -> User:
    """Insert or refresh the user row from provider claims."""
    values = {
        "email": claims.email,
        "first_name": claims.first_name,
        "last_name": claims.last_name,
        "profile_image_url": claims.profile_image_url,
    }
    stmt = (
        insert(User)
        .values(id=claims.sub, **values)
        .on_conflict_do_update(
            index_elements=[User.id],
            set_={**values, "updated_at": func.now()},
        )
        .returning(User)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one()  # type: ignore[no-any-return]


async def get_current_user_optional(request: Request, db: DbSession) -> User | None:
    """Resolve the signed-in user, or None when no valid token is present."""
    token = extract_token(request)
    if not token:
        return None

    try:
        claims = decode_identity_token(token)
    except AuthenticationError:
        logger.info("Rejected identity token", path=request.url.path)
        return None

    result = await db.execute(select(User).where(User.id == claims.sub))
    user = result.scalar_one_or_none()
    if user is None:
        user = await upsert_user(db, claims)
    return user


async def require_admin(
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    """Guard for dashboard and admin API routes."""
    if user is None:
        raise AuthenticationError()
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(require_admin)]
