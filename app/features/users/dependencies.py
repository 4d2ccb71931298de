"""
FastAPI dependencies for authentication and rate limiting.
"""
from typing import Annotated
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.database.engine import get_db
from app.features.users import service as user_service
from app.features.users.models import User
from app.features.users.auth import token_subject, verify_jwt_token


security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> User:
    """
    Get the current authenticated user from JWT token.

    This dependency:
    1. Extracts JWT from Authorization header
    2. Verifies the signature and expiry
    3. Loads the user with role and permissions

    Usage:
        @router.get("/me")
        async def get_me(user: User = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_jwt_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    user = await user_service.find(db, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )

    return user


def rate_limit_key(request: Request) -> str:
    """
    Rate-limit bucket for a request.

    Requests carrying a valid bearer token are counted per user; everything
    else (no token, junk or expired token) is counted per client address.
    """
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        subject = token_subject(token.strip())
        if subject is not None:
            return f"user:{subject}"
    return get_remote_address(request)


def current_rate_limit() -> str:
    # Read on every request so RATE_LIMIT can be changed at runtime
    return config.RATE_LIMIT


limiter = Limiter(key_func=rate_limit_key)

# Route decorator: place it under the router decorator; the route needs a `request` argument
rate_limited = limiter.limit(current_rate_limit)
