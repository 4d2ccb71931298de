"""
Role and permission data access, including the role-permission reconciler.

The reconciler has two mutations on a role's permission set:
- assign_additional: merge the given permissions into the existing set
- replace_permissions: overwrite the set with exactly the given permissions

In both cases permission IDs that do not match a Permission row are dropped.
"""
from typing import Iterable, Sequence
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database.base import utcnow
from app.core.errors import ConflictError, NotFoundError, RoleDeleteBlockedError
from app.core.pagination import paginate
from app.features.permissions.models import Permission, Role, role_permissions
from app.features.permissions.schemas import RoleCreate, RoleUpdate
from app.utils import get_logger


log = get_logger(__name__)


# ============================================================================
# Permissions
# ============================================================================

async def list_permissions(db: AsyncSession) -> Sequence[Permission]:
    result = await db.execute(select(Permission).order_by(Permission.id))
    return result.scalars().all()


async def resolve_permissions(db: AsyncSession, permission_ids: Iterable[int]) -> list[Permission]:
    """Return the Permission rows matching `permission_ids`; unknown IDs are skipped."""
    ids = set(permission_ids)
    if not ids:
        return []
    result = await db.execute(select(Permission).where(Permission.id.in_(ids)).order_by(Permission.id))
    return list(result.scalars().all())


# ============================================================================
# Roles
# ============================================================================

async def find(db: AsyncSession, role_id: int) -> Role | None:
    """Load a live role with its permissions, or None."""
    stmt = (
        select(Role)
        .where(Role.id == role_id, Role.not_deleted())
        .options(selectinload(Role.permissions))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_or_404(db: AsyncSession, role_id: int) -> Role:
    role = await find(db, role_id)
    if role is None:
        raise NotFoundError("Role", role_id)
    return role


async def role_exist(db: AsyncSession, name: str, exclude_id: int | None = None) -> bool:
    """Check whether a live role already uses `name`."""
    stmt = select(Role.id).where(Role.name == name, Role.not_deleted())
    if exclude_id is not None:
        stmt = stmt.where(Role.id != exclude_id)
    return await db.scalar(stmt) is not None


async def create(db: AsyncSession, data: RoleCreate) -> Role:
    """Create a role with an empty permission set. Raises ConflictError on a name clash."""
    if await role_exist(db, data.name):
        raise ConflictError(f"Role with name [{data.name}] already exists.")

    role = Role(**data.model_dump(), permissions=[])
    db.add(role)
    await db.commit()
    return await get_or_404(db, role.id)


async def find_all(
    db: AsyncSession,
    page: int | None = None,
    page_size: int | None = None,
    name: str | None = None,
) -> tuple[Sequence[Role], int]:
    stmt = select(Role).where(Role.not_deleted())
    if name:
        stmt = stmt.where(Role.name.like(f"%{name}%"))
    return await paginate(db, stmt, Role.id, page, page_size)


async def edit(db: AsyncSession, role: Role, data: RoleUpdate) -> Role:
    update_data = data.model_dump(exclude_unset=True)
    if "name" in update_data and await role_exist(db, update_data["name"], exclude_id=role.id):
        raise ConflictError(f"Role with name [{update_data['name']}] already exists.")

    for key, value in update_data.items():
        setattr(role, key, value)

    await db.commit()
    return await get_or_404(db, role.id)


async def destroy(db: AsyncSession, role: Role) -> Role:
    """
    Soft-delete `role` if it owns no permissions.

    Returns the role as it was before deletion. Raises RoleDeleteBlockedError
    and leaves the role in place when any permission is still attached.
    """
    count = await db.scalar(
        select(func.count()).select_from(role_permissions).where(role_permissions.c.role_id == role.id)
    )
    if count:
        log.warning("Refusing to delete role %s: %s permission(s) attached", role.id, count)
        raise RoleDeleteBlockedError()

    await db.execute(
        update(Role)
        .where(Role.id == role.id)
        .values(deleted_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return role


# ============================================================================
# Role-Permission Reconciler
# ============================================================================

async def assign_additional(db: AsyncSession, role_id: int, permission_ids: Iterable[int]) -> Role:
    """
    Add permissions to a role without removing the ones it already has.

    Raises:
        NotFoundError: if the role does not exist
    """
    role = await get_or_404(db, role_id)
    current = {permission.id for permission in role.permissions}

    added = []
    for permission in await resolve_permissions(db, permission_ids):
        if permission.id not in current:
            role.permissions.append(permission)
            current.add(permission.id)
            added.append(permission.id)

    await db.commit()
    log.debug("Role %s gained permissions %s", role_id, added)
    return await get_or_404(db, role_id)


async def replace_permissions(db: AsyncSession, role_id: int, permission_ids: Iterable[int]) -> Role:
    """
    Overwrite a role's permission set with exactly the resolved `permission_ids`.

    An empty list clears the set.

    Raises:
        NotFoundError: if the role does not exist
    """
    role = await get_or_404(db, role_id)
    resolved = await resolve_permissions(db, permission_ids)

    role.permissions = resolved

    await db.commit()
    log.debug("Role %s permissions set to %s", role_id, [p.id for p in resolved])
    return await get_or_404(db, role_id)
