"""Activity log model: audit trail of user-triggered events."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, func

from recruitment.models.base import Base


class ActivityLog(Base):
    __tablename__ = "activity_log"

    log_id = Column(Integer, primary_key=True)
    level = Column(String(10), nullable=False)  # INFO, ERROR, DEBUG
    event_type = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    ip = Column(String(64))
    user_agent = Column(String(500))
    actor_person_id = Column(Integer, ForeignKey("person.person_id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_activity_log_actor_event", "actor_person_id", "event_type"),
    )
