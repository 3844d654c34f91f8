"""Authentication helpers: users, session cookie, and caller identity."""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from fastapi import Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..database import get_db
from ..models.models import User
from .errors import UnauthenticatedError
from .security import (
    InvalidSessionToken,
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
)

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def set_auth_cookie(response: Response, token: str):
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite=settings.auth_cookie_samesite,
        max_age=settings.jwt_expire_days * 24 * 3600,
        path="/",
    )


def clear_auth_cookie(response: Response):
    response.delete_cookie(key=get_settings().auth_cookie_name, path="/")


def issue_session(response: Response, user: User):
    set_auth_cookie(response, create_access_token({"sub": str(user.id), "email": user.email}))


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == _normalize_email(email)))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, email: str, password: str) -> User:
    user = User(
        email=_normalize_email(email),
        password_hash=hash_password(password),
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


class IdentityProvider(Protocol):
    async def current_user_id(self) -> Optional[int]: ...


class SessionCookieIdentity:
    """Resolves the caller from the session cookie.

    Every failure (no cookie, bad signature, expired, unknown or inactive
    user) resolves to ``None``, meaning anonymous.
    """

    def __init__(self, request: Request, db: AsyncSession):
        self._request = request
        self._db = db

    async def current_user(self) -> User | None:
        token = self._request.cookies.get(get_settings().auth_cookie_name)
        if not token:
            return None
        try:
            user_id = int(decode_access_token(token).get("sub"))
        except (InvalidSessionToken, TypeError, ValueError):
            return None
        try:
            user = await self._db.get(User, user_id)
        except SQLAlchemyError:
            logger.exception("User lookup failed while resolving session; treating caller as anonymous")
            await self._db.rollback()
            return None
        if not user or not user.is_active:
            return None
        return user

    async def current_user_id(self) -> Optional[int]:
        user = await self.current_user()
        return user.id if user else None


def get_identity_provider(request: Request, db: AsyncSession = Depends(get_db)) -> IdentityProvider:
    return SessionCookieIdentity(request, db)


async def get_current_user_id(
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Optional[int]:
    """Caller id or ``None``; handlers decide whether anonymous is allowed."""
    return await identity.current_user_id()


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await SessionCookieIdentity(request, db).current_user()
    if user is None:
        raise UnauthenticatedError("Authentication required")
    return user
