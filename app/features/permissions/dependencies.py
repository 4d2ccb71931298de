"""
Permission checking dependencies for route protection.
"""
from fastapi import Depends, HTTPException, status

from app.features.users.dependencies import get_current_user
from app.features.users.models import User
from app.utils import get_logger


log = get_logger(__name__)


def has_permission(user: User, action: str) -> bool:
    """
    Check whether the user's role grants the named permission.

    Users without a role have no permissions.
    """
    granted = user.has_permission(action)
    if granted:
        log.debug(f"User {user.id} granted permission {action}")
    else:
        log.debug(f"User {user.id} denied permission {action}")
    return granted


def require_permission(action: str):
    """
    FastAPI dependency to require a specific permission.

    Usage:
        @router.delete("/{role_id}")
        async def delete_role(
            role_id: int,
            user: User = Depends(require_permission("Delete"))
        ):
            # User's role holds "Delete"
            pass

    Args:
        action: Permission name, e.g. "Create", "Read", "Update", "Delete", "List"

    Returns:
        Dependency function that returns the current user if they have permission

    Raises:
        HTTPException: 403 if user doesn't have permission
    """
    async def permission_dependency(
        current_user: User = Depends(get_current_user)
    ) -> User:
        if not has_permission(current_user, action):
            log.warning("User [%s] lacks permission [%s]", current_user.id, action)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {action}"
            )
        return current_user

    return permission_dependency
