"""Password reset token model. Tokens are stored as SHA-256 hashes."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from recruitment.models.base import Base


class PasswordResetToken(Base):
    __tablename__ = "password_reset_token"

    token_id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
