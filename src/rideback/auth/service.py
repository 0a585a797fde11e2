"""
Account business logic.

Only what the core needs from its authentication collaborator: creating an
account, checking and changing credentials, and resolving a user id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from rideback.auth.password import hash_password, needs_rehash, verify_password
from rideback.db.models import User
from rideback.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    """Fetch a user by handle (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.username) == username.lower()))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    username: str,
    password: str,
    email: str | None = None,
    phone: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    """
    Create an account with a hashed password.

    Raises:
        ConflictError: If the username is already taken.
    """
    if await get_user_by_username(db, username) is not None:
        msg = "Username already taken"
        raise ConflictError(msg)

    user = User(
        username=username,
        password_hash=hash_password(password),
        email=email,
        phone=phone,
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "Username already taken"
        raise ConflictError(msg) from e
    logger.info("user_created", user_id=user.id, username=username)
    return user


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User:
    """
    Check a username + password pair.

    Raises:
        AuthenticationError: If the credentials are invalid.
    """
    user = await get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        msg = "Invalid username or password"
        raise AuthenticationError(msg)

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        await db.flush()
        logger.info("password_rehashed", user_id=user.id)
    return user


async def change_password(db: AsyncSession, user_id: int, current_password: str, new_password: str) -> User:
    """
    Replace the password after re-checking the current one.

    Raises:
        NotFoundError: If the account no longer exists.
        AuthenticationError: If the current password is wrong.
        ValidationError: If the new password equals the current one.
    """
    user = await get_user_by_id(db, user_id)
    if user is None:
        msg = "User not found"
        raise NotFoundError(msg)
    if not verify_password(current_password, user.password_hash):
        msg = "Current password is incorrect"
        raise AuthenticationError(msg)
    if new_password == current_password:
        raise ValidationError.for_field("newPassword", "New password must differ from the current one")

    user.password_hash = hash_password(new_password)
    await db.flush()
    logger.info("password_changed", user_id=user.id)
    return user
