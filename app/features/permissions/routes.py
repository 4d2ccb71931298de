"""
Role and permission API routes.

Provides the permission catalog and endpoints for managing roles and their
permission sets.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.errors import ConflictError, NotFoundError, RoleDeleteBlockedError
from app.core.export import ExportColumn, build_workbook, xlsx_response
from app.features.users.dependencies import get_current_user, rate_limited
from app.features.users.models import User
from app.features.permissions import service as role_service
from app.features.permissions.schemas import (
    PermissionListResponse,
    RoleCreate,
    RoleUpdate,
    RoleWithPermissions,
    RoleListResponse,
    RoleMessage,
    RolePermissionIds,
)
from app.features.permissions.dependencies import require_permission
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()
role_router = APIRouter()

ROLE_EXPORT_COLUMNS = [
    ExportColumn("ID", "id", 10),
    ExportColumn("Name", "name", 30),
    ExportColumn("Description", "description", 50),
]


# ============================================================================
# Permission Routes
# ============================================================================

@router.get("", response_model=PermissionListResponse)
@rate_limited
async def list_permissions(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("List"))
):
    """List the permission catalog."""
    permissions = await role_service.list_permissions(db)
    return {"data": permissions, "count": len(permissions)}


# ============================================================================
# Role Routes
# ============================================================================

@role_router.post("", response_model=RoleMessage, status_code=status.HTTP_201_CREATED)
@rate_limited
async def create_role(
    request: Request,
    role: RoleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Create"))
):
    """Create a new role with no permissions."""
    try:
        db_role = await role_service.create(db, role)
    except ConflictError as e:
        log.warning(f"Error creating the role [{role.name}]: {e.message}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    log.info(f"Role with name [{db_role.name}] created successfully.")
    return {"message": f"Role with name [{db_role.name}] created successfully.", "data": db_role}


@role_router.get("", response_model=RoleListResponse)
@rate_limited
async def list_roles(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500, alias="pageSize"),
    name: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("List"))
):
    """List roles page by page, optionally filtered by a name substring."""
    rows, count = await role_service.find_all(db, page, page_size, name)
    return {"data": rows, "count": count}


@role_router.get("/export")
@rate_limited
async def export_roles(
    request: Request,
    name: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Download every matching role as an .xlsx sheet."""
    rows, _ = await role_service.find_all(db, name=name)
    content = build_workbook(
        "Roles",
        ROLE_EXPORT_COLUMNS,
        ({"id": r.id, "name": r.name, "description": r.description} for r in rows),
    )
    return xlsx_response("roles.xlsx", content)


@role_router.get("/{role_id}", response_model=RoleWithPermissions)
@rate_limited
async def get_role(
    request: Request,
    role_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Read"))
):
    """Get a specific role with its permissions."""
    role = await role_service.find(db, role_id)
    if not role:
        log.warning(f"Role ID [{role_id}] does not exist")
        raise HTTPException(status_code=404, detail=f"Role with ID [{role_id}] does not exist.")
    return role


@role_router.put("/{role_id}", response_model=RoleMessage)
@rate_limited
async def update_role(
    request: Request,
    role_id: int,
    role_update: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Update"))
):
    """Update a role's name or description."""
    db_role = await role_service.find(db, role_id)
    if not db_role:
        log.warning(f"Role ID [{role_id}] does not exist")
        raise HTTPException(status_code=404, detail=f"Role with ID [{role_id}] does not exist.")

    try:
        db_role = await role_service.edit(db, db_role, role_update)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    log.info(f"Role with ID [{db_role.id}] has been successfully modified.")
    return {"message": f"Role with name [{db_role.name}] has been successfully modified.", "data": db_role}


@role_router.delete("/{role_id}", response_model=RoleMessage)
@rate_limited
async def delete_role(
    request: Request,
    role_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Delete"))
):
    """Delete a role. Refused while the role still has permissions."""
    db_role = await role_service.find(db, role_id)
    if not db_role:
        log.warning(f"Role ID [{role_id}] does not exist")
        raise HTTPException(status_code=404, detail=f"Role with ID [{role_id}] does not exist.")

    try:
        deleted = await role_service.destroy(db, db_role)
    except RoleDeleteBlockedError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    log.info(f"Role with ID [{role_id}] has been deleted.")
    return {"message": f"Role with name [{deleted.name}] has been deleted.", "data": deleted}


@role_router.post("/{role_id}/permissions", response_model=RoleMessage)
@rate_limited
async def assign_permissions_to_role(
    request: Request,
    role_id: int,
    assignment: RolePermissionIds,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Create"))
):
    """Add permissions to a role, keeping the ones it already has."""
    try:
        role = await role_service.assign_additional(db, role_id, assignment.permission_ids)
    except NotFoundError as e:
        log.warning(e.message)
        raise HTTPException(status_code=404, detail=e.message)

    log.info(f"Permissions assigned to the role with ID {role_id}")
    return {"message": f"Permissions assigned to role with ID {role_id}", "data": role}


@role_router.put("/{role_id}/permissions", response_model=RoleMessage)
@rate_limited
async def replace_role_permissions(
    request: Request,
    role_id: int,
    assignment: RolePermissionIds,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_permission("Update"))
):
    """Replace a role's permissions with exactly the given set."""
    try:
        role = await role_service.replace_permissions(db, role_id, assignment.permission_ids)
    except NotFoundError as e:
        log.warning(e.message)
        raise HTTPException(status_code=404, detail=e.message)

    log.info(f"Permissions updated for the role with ID {role_id}")
    return {"message": f"Permissions updated for role with ID {role_id}", "data": role}
