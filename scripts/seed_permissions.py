"""
Seed script to populate default permissions, roles and the bootstrap admin.

Run this script after database initialization to create:
- The permission catalog (Create, Read, Update, Delete, List)
- The ADMIN role holding every permission, and the default User role
- An admin user (ADMIN_EMAIL / ADMIN_PASSWORD) holding the ADMIN role

Running it again is safe: existing rows are left alone.

Usage:
    python -m scripts.seed_permissions
"""
import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.database.engine import Database
from app.features.permissions.models import Permission, Role
from app.features.users.auth import hash_password
from app.features.users.models import User, Person
from app.utils import get_logger


log = get_logger(__name__)


DEFAULT_PERMISSIONS = [
    ("Create", "Create records"),
    ("Read", "View a single record"),
    ("Update", "Update existing records"),
    ("Delete", "Delete records"),
    ("List", "List and search records"),
]


DEFAULT_ROLES = {
    "ADMIN": {
        "description": "Administrator with all permissions",
        "permissions": "ALL"  # Special case - gets all permissions
    },
    config.DEFAULT_ROLE_NAME: {
        "description": "Default role for registered users",
        "permissions": ["Read", "List"]
    },
}


async def seed_permissions(db: AsyncSession) -> dict[str, Permission]:
    """
    Create default permissions.

    Returns:
        Dictionary mapping permission names to Permission objects
    """
    log.info("Creating default permissions...")
    permissions_map = {}

    for name, description in DEFAULT_PERMISSIONS:
        existing = await db.scalar(select(Permission).where(Permission.name == name))
        if existing:
            log.debug(f"Permission '{name}' already exists, skipping")
            permissions_map[name] = existing
            continue

        permission = Permission(name=name, description=description)
        db.add(permission)
        permissions_map[name] = permission
        log.info(f"Created permission: {name}")

    await db.commit()
    log.info(f"{len(permissions_map)} permissions available")
    return permissions_map


async def seed_roles(db: AsyncSession, permissions_map: dict[str, Permission]) -> dict[str, Role]:
    """
    Create default roles and assign permissions.

    Args:
        db: Database session
        permissions_map: Dictionary of permission name -> Permission object
    """
    log.info("Creating default roles...")
    roles_map = {}

    for role_name, role_config in DEFAULT_ROLES.items():
        existing = await db.scalar(
            select(Role).where(Role.name == role_name, Role.not_deleted())
        )
        if existing:
            log.debug(f"Role '{role_name}' already exists, skipping")
            roles_map[role_name] = existing
            continue

        role = Role(name=role_name, description=role_config["description"])

        if role_config["permissions"] == "ALL":
            role.permissions = list(permissions_map.values())
            log.info(f"Created role '{role_name}' with ALL permissions")
        else:
            role_permissions = []
            for perm_name in role_config["permissions"]:
                if perm_name in permissions_map:
                    role_permissions.append(permissions_map[perm_name])
                else:
                    log.warning(f"Permission '{perm_name}' not found for role '{role_name}'")

            role.permissions = role_permissions
            log.info(f"Created role '{role_name}' with {len(role_permissions)} permissions")

        db.add(role)
        roles_map[role_name] = role

    await db.commit()
    log.info("Default roles created successfully")
    return roles_map


async def seed_admin(db: AsyncSession, role: Role, email: str, password: str) -> User:
    """Create the bootstrap admin user unless the email is taken."""
    existing = await db.scalar(select(User).where(User.email == email))
    if existing:
        log.debug(f"User '{email}' already exists, skipping")
        return existing

    user = User(
        email=email,
        name="Admin",
        password_hash=hash_password(password),
        role_id=role.id,
        person=Person(),
    )
    db.add(user)
    await db.commit()
    log.info(f"Created admin user: {email}")
    return user


async def seed(database: Database) -> None:
    """Seed permissions, roles and the admin user into `database`."""
    async with database.session() as db:
        try:
            permissions_map = await seed_permissions(db)
            roles_map = await seed_roles(db, permissions_map)
            await seed_admin(db, roles_map["ADMIN"], config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
        except Exception as e:
            log.error(f"Error seeding permissions: {e}", exc_info=True)
            await db.rollback()
            raise


async def main():
    """Main function to seed permissions and roles."""
    log.info("Starting permission seeding...")
    database = Database()

    log.info("Initializing database tables...")
    await database.init()
    try:
        await seed(database)
    finally:
        await database.dispose()

    log.info("Permission seeding completed successfully!")
    log.info("")
    log.info("Default roles created:")
    for role_name, role_config in DEFAULT_ROLES.items():
        log.info(f"  - {role_name}: {role_config['description']}")


if __name__ == "__main__":
    asyncio.run(main())
