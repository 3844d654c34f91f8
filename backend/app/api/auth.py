"""Authentication API routes."""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.schemas import UserRegisterRequest, UserLoginRequest, AuthStatusResponse
from ..services.auth_service import (
    get_user_by_email,
    create_user,
    authenticate_user,
    issue_session,
    clear_auth_cookie,
    get_current_user,
)
from ..services.errors import ConflictError, UnauthenticatedError
from ..models.models import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthStatusResponse)
async def register(data: UserRegisterRequest, response: Response, db: AsyncSession = Depends(get_db)):
    if await get_user_by_email(db, data.email):
        raise ConflictError("Email already registered")
    user = await create_user(db, data.email, data.password)
    issue_session(response, user)
    return {"user": user}


@router.post("/login", response_model=AuthStatusResponse)
async def login(data: UserLoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    user = await authenticate_user(db, data.email, data.password)
    if not user:
        raise UnauthenticatedError("Invalid email or password")
    issue_session(response, user)
    return {"user": user}


@router.post("/logout")
async def logout(response: Response):
    clear_auth_cookie(response)
    return {"ok": True}


@router.get("/me", response_model=AuthStatusResponse)
async def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}
