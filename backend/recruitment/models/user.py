"""Person and role models."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from recruitment.models.base import Base, TimestampMixin

ROLE_RECRUITER = 1
ROLE_APPLICANT = 2
ROLE_NAMES = {ROLE_RECRUITER: "recruiter", ROLE_APPLICANT: "applicant"}


class Role(Base):
    __tablename__ = "role"

    role_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(50), unique=True, nullable=False)


class Person(TimestampMixin, Base):
    __tablename__ = "person"

    person_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    surname = Column(String(100), nullable=False)
    pnr = Column(String(13), unique=True)
    email = Column(String(255), unique=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("role.role_id"), nullable=False, default=ROLE_APPLICANT)

    # Relationships
    role = relationship("Role")
