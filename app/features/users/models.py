"""
User and Person models.
"""
from datetime import date
from sqlalchemy import String, Boolean, ForeignKey, Date, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin
from app.features.permissions.models import Role


class User(Base, TimestampMixin):
    """
    User model representing authenticated users.

    Each user holds at most one role; its permissions are the user's
    effective permissions.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # User information
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Status flags
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    role_id: Mapped[int | None] = mapped_column(
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Relationships
    role: Mapped[Role | None] = relationship(Role, lazy="selectin")

    person: Mapped["Person | None"] = relationship(
        "Person",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    def has_permission(self, name: str) -> bool:
        """A user without a role has no permissions."""
        return self.role is not None and self.role.has_permission(name)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"


class Person(Base, TimestampMixin):
    """
    Personal profile details attached one-to-one to a user.
    """
    __tablename__ = "people"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    birth_date: Mapped[date | None] = mapped_column(Date)
    telephone: Mapped[str | None] = mapped_column(String(30))
    biography: Mapped[str | None] = mapped_column(Text)

    user: Mapped[User] = relationship("User", back_populates="person")

    def __repr__(self) -> str:
        return f"<Person(id={self.id}, user_id={self.user_id})>"
