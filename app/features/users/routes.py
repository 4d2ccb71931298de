"""
Authentication and profile routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import AuthenticationError, ConflictError, NotFoundError
from app.features.users import service as user_service
from app.features.users.auth import create_access_token
from app.features.users.models import User
from app.features.users.schemas import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    ProfileUpdate,
    ProfileMessage,
)
from app.features.users.dependencies import get_current_user, rate_limited
from app.utils import get_logger


log = get_logger(__name__)
auth_router = APIRouter(tags=["auth"])
profile_router = APIRouter(tags=["profile"])


@auth_router.post("/login", response_model=TokenResponse)
@rate_limited
async def login(
    request: Request,
    credentials: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Exchange email and password for a bearer token."""
    try:
        user = await user_service.authenticate(db, credentials.email, credentials.password)
    except AuthenticationError as e:
        log.warning("Failed login for %s", credentials.email)
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    log.info("User [%s] logged in", user.id)
    return {"token": create_access_token(user.id, user.email), "user": user}


@auth_router.post("/register", response_model=ProfileMessage, status_code=status.HTTP_201_CREATED)
@rate_limited
async def register(
    request: Request,
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a new account with the default role."""
    try:
        user = await user_service.register(db, data)
    except ConflictError as e:
        log.warning(e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message)

    log.info("User [%s] registered", user.id)
    return {"message": f"User with email [{user.email}] created successfully.", "data": user}


@profile_router.get("", response_model=UserResponse)
@rate_limited
async def get_profile(
    request: Request,
    user: Annotated[User, Depends(get_current_user)]
):
    """Get current authenticated user's profile, role and permissions."""
    return user


@profile_router.put("", response_model=ProfileMessage)
@rate_limited
async def update_profile(
    request: Request,
    update_data: ProfileUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Update current user's account and person details."""
    try:
        updated = await user_service.edit_profile(db, user.id, update_data)
    except (NotFoundError, ConflictError) as e:
        log.warning(e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message)

    log.info("Profile of user [%s] updated", updated.id)
    return {"message": "Profile updated successfully.", "data": updated}
