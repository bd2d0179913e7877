"""Job application model."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, text

from recruitment.models.base import Base

STATUS_UNHANDLED = "unhandled"
STATUS_ACCEPTED = "accepted"
STATUS_REJECTED = "rejected"
APPLICATION_STATUSES = (STATUS_UNHANDLED, STATUS_ACCEPTED, STATUS_REJECTED)


class Application(Base):
    __tablename__ = "applications"

    application_id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), nullable=False, default=STATUS_UNHANDLED, server_default=STATUS_UNHANDLED)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    __table_args__ = (
        CheckConstraint("status IN ('unhandled', 'accepted', 'rejected')", name="ck_applications_status"),
        Index("idx_applications_status_created", "status", "created_at"),
        # One unhandled application per person
        Index(
            "uq_applications_one_unhandled",
            "person_id",
            unique=True,
            postgresql_where=text("status = 'unhandled'"),
            sqlite_where=text("status = 'unhandled'"),
        ),
    )
