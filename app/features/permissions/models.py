"""
Permission and Role models for role-based access control.

- Permissions are a fixed catalog of named actions ("Create", "Read", ...)
- Roles own a set of permissions through the role_permissions join table
- Users reference exactly one role (see app.features.users.models)
"""
from sqlalchemy import String, ForeignKey, Table, Column, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, SoftDeleteMixin


# ============================================================================
# Association Tables for Many-to-Many Relationships
# ============================================================================

# Role-Permission relationship; the composite key keeps a role's set free of duplicates
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


# ============================================================================
# Core Models
# ============================================================================

class Permission(Base, TimestampMixin):
    """
    Permission model naming a single action a role may perform.

    Seeded out-of-band (see scripts/seed_permissions.py) and never modified
    through the API. Examples: Create, Read, Update, Delete, List.
    """
    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Permission(id={self.id}, name={self.name!r})>"


class Role(Base, TimestampMixin, SoftDeleteMixin):
    """
    Role model for grouping permissions.

    Examples: ADMIN, User
    """
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Uniqueness is checked by the create flow, not by the schema
    name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary=role_permissions,
        lazy="selectin",
        order_by="Permission.id",
    )

    def has_permission(self, name: str) -> bool:
        return any(permission.name == name for permission in self.permissions)

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name!r})>"
