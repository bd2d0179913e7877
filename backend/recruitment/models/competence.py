"""Competence catalog, per-locale translations and the per-person competence profile."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String, UniqueConstraint

from recruitment.models.base import Base


class Competence(Base):
    __tablename__ = "competence"

    competence_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)


class CompetenceTranslation(Base):
    __tablename__ = "competence_translation"

    competence_translation_id = Column(Integer, primary_key=True)
    competence_id = Column(Integer, ForeignKey("competence.competence_id", ondelete="CASCADE"), nullable=False)
    locale = Column(String(2), nullable=False)
    name = Column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint("competence_id", "locale", name="uq_competence_translation_locale"),
    )


class CompetenceProfile(Base):
    __tablename__ = "competence_profile"

    competence_profile_id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False, index=True)
    competence_id = Column(Integer, ForeignKey("competence.competence_id"), nullable=False)
    years_of_experience = Column(Numeric(4, 2, asdecimal=False), nullable=False)

    __table_args__ = (
        UniqueConstraint("person_id", "competence_id", name="uq_competence_profile_person_competence"),
        CheckConstraint("years_of_experience > 0", name="ck_competence_profile_years_positive"),
    )
