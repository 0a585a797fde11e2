"""FastAPI authentication dependencies."""

from __future__ import annotations

from dataclasses import dataclass

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rideback.auth.jwt import verify_token
from rideback.auth.service import get_user_by_id
from rideback.config import get_settings
from rideback.database import get_session
from rideback.errors import AuthenticationError, AuthorizationError

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller, passed explicitly into every core operation."""

    id: int
    username: str
    is_admin: bool = False


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> CurrentUser:
    """
    Verify the bearer token and resolve the caller.

    Raises AuthenticationError (401) when the token is missing, invalid,
    or names a user that no longer exists.
    """
    if credentials is None:
        msg = "Authentication required"
        raise AuthenticationError(msg)
    try:
        payload = verify_token(credentials.credentials, expected_type="access")
        user_id = int(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError) as e:
        raise AuthenticationError(str(e) or "Invalid token") from e

    user = await get_user_by_id(db, user_id)
    if user is None:
        msg = "User not found"
        raise AuthenticationError(msg)

    is_admin = user.is_admin or user.id in get_settings().admin_user_ids
    return CurrentUser(id=user.id, username=user.username, is_admin=is_admin)


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Same as get_current_user but additionally requires admin privilege."""
    if not user.is_admin:
        msg = "You do not have permission to perform this action"
        raise AuthorizationError(msg)
    return user
