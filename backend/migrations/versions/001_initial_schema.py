"""Initial schema: roles, people, sessions, competences, availability, applications, activity log.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. role
    role = op.create_table(
        "role",
        sa.Column("role_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(50), unique=True, nullable=False),
    )
    op.bulk_insert(role, [{"role_id": 1, "name": "recruiter"}, {"role_id": 2, "name": "applicant"}])

    # 2. person
    op.create_table(
        "person",
        sa.Column("person_id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("surname", sa.String(100), nullable=False),
        sa.Column("pnr", sa.String(13), unique=True),
        sa.Column("email", sa.String(255), unique=True),
        sa.Column("username", sa.String(100), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role_id", sa.Integer, sa.ForeignKey("role.role_id"), nullable=False, server_default=sa.text("2")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_person_username", "person", ["username"])

    # 3. session
    op.create_table(
        "session",
        sa.Column("session_id", sa.Integer, primary_key=True),
        sa.Column("person_id", sa.Integer, sa.ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String(64), unique=True, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_session_person_id", "session", ["person_id"])

    # 4. competence catalog and translations
    op.create_table(
        "competence",
        sa.Column("competence_id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_table(
        "competence_translation",
        sa.Column("competence_translation_id", sa.Integer, primary_key=True),
        sa.Column("competence_id", sa.Integer, sa.ForeignKey("competence.competence_id", ondelete="CASCADE"), nullable=False),
        sa.Column("locale", sa.String(2), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.UniqueConstraint("competence_id", "locale", name="uq_competence_translation_locale"),
    )

    # 5. competence_profile
    op.create_table(
        "competence_profile",
        sa.Column("competence_profile_id", sa.Integer, primary_key=True),
        sa.Column("person_id", sa.Integer, sa.ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False),
        sa.Column("competence_id", sa.Integer, sa.ForeignKey("competence.competence_id"), nullable=False),
        sa.Column("years_of_experience", sa.Numeric(4, 2), nullable=False),
        sa.UniqueConstraint("person_id", "competence_id", name="uq_competence_profile_person_competence"),
        sa.CheckConstraint("years_of_experience > 0", name="ck_competence_profile_years_positive"),
    )
    op.create_index("ix_competence_profile_person_id", "competence_profile", ["person_id"])

    # 6. availability
    op.create_table(
        "availability",
        sa.Column("availability_id", sa.Integer, primary_key=True),
        sa.Column("person_id", sa.Integer, sa.ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False),
        sa.Column("from_date", sa.Date, nullable=False),
        sa.Column("to_date", sa.Date, nullable=False),
        sa.CheckConstraint("from_date <= to_date", name="ck_availability_from_before_to"),
    )
    op.create_index("idx_availability_person_dates", "availability", ["person_id", "from_date", "to_date"])

    # 7. applications
    op.create_table(
        "applications",
        sa.Column("application_id", sa.Integer, primary_key=True),
        sa.Column("person_id", sa.Integer, sa.ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="unhandled"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("status IN ('unhandled', 'accepted', 'rejected')", name="ck_applications_status"),
    )
    op.create_index("idx_applications_status_created", "applications", ["status", "created_at"])
    op.create_index(
        "uq_applications_one_unhandled",
        "applications",
        ["person_id"],
        unique=True,
        postgresql_where=sa.text("status = 'unhandled'"),
    )

    # 8. password_reset_token
    op.create_table(
        "password_reset_token",
        sa.Column("token_id", sa.Integer, primary_key=True),
        sa.Column("person_id", sa.Integer, sa.ForeignKey("person.person_id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String(64), unique=True, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_password_reset_token_person_id", "password_reset_token", ["person_id"])

    # 9. activity_log
    op.create_table(
        "activity_log",
        sa.Column("log_id", sa.Integer, primary_key=True),
        sa.Column("level", sa.String(10), nullable=False),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("ip", sa.String(64)),
        sa.Column("user_agent", sa.String(500)),
        sa.Column("actor_person_id", sa.Integer, sa.ForeignKey("person.person_id", ondelete="SET NULL")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_activity_log_actor_event", "activity_log", ["actor_person_id", "event_type"])


def downgrade() -> None:
    op.drop_table("activity_log")
    op.drop_table("password_reset_token")
    op.drop_table("applications")
    op.drop_table("availability")
    op.drop_table("competence_profile")
    op.drop_table("competence_translation")
    op.drop_table("competence")
    op.drop_table("session")
    op.drop_table("person")
    op.drop_table("role")
