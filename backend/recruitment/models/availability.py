"""Availability range model."""

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Index, Integer

from recruitment.models.base import Base


class Availability(Base):
    __tablename__ = "availability"

    availability_id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint("from_date <= to_date", name="ck_availability_from_before_to"),
        Index("idx_availability_person_dates", "person_id", "from_date", "to_date"),
    )
