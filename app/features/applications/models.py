"""
Application SQLAlchemy model.
"""
from datetime import date
import enum
from sqlalchemy import String, Text, Date, Enum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, SoftDeleteMixin
from app.features.contacts.models import Contact


class ApplicationStatus(str, enum.Enum):
    APPLIED = "Applied"
    INTERVIEW = "Interview"
    CODE_CHALLENGE = "Code Challenge"
    TECHNICAL_INTERVIEW = "Technical Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"


class Application(Base, TimestampMixin, SoftDeleteMixin):
    """
    A job application sent to a company.

    Attributes:
        id: Integer primary key
        position: Job title applied for
        company: Company name
        company_website: Company website URL
        link_application: Link to the job posting or application portal
        status: Current stage of the application
        notes: Free-form notes
        applied_date: Date the application was sent
        contact_id: Foreign key to the Contact for this application
    """
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    position: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    company_website: Mapped[str | None] = mapped_column(String(500))
    link_application: Mapped[str | None] = mapped_column(Text)
    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(
            ApplicationStatus,
            name="application_status",
            native_enum=False,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=ApplicationStatus.APPLIED,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text)
    applied_date: Mapped[date] = mapped_column(Date, nullable=False)
    contact_id: Mapped[int | None] = mapped_column(ForeignKey("contacts.id"), index=True)

    # Relationships; a soft-deleted contact loads as None
    contact: Mapped[Contact | None] = relationship(
        Contact,
        primaryjoin="and_(Application.contact_id == Contact.id, Contact.deleted_at.is_(None))",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_applications_natural_key", "position", "company"),
    )

    def __repr__(self):
        return f"<Application(id={self.id}, company={self.company!r}, position={self.position!r})>"
