"""Login session model. Only the HMAC of the token is stored."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from recruitment.models.base import Base


class UserSession(Base):
    __tablename__ = "session"

    session_id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
