"""
Contact SQLAlchemy model.
"""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, SoftDeleteMixin


class Contact(Base, TimestampMixin, SoftDeleteMixin):
    """
    Person of contact for an application (recruiter, hiring manager, ...).

    Attributes:
        id: Integer primary key
        name: Contact's full name
        email: Contact email address
        linkedin: LinkedIn profile URL
        company: Company the contact works for
    """
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    linkedin: Mapped[str | None] = mapped_column(String(500))
    company: Mapped[str | None] = mapped_column(String(255))

    def __repr__(self):
        return f"<Contact(id={self.id}, name={self.name!r})>"
