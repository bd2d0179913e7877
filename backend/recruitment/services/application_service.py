"""Application lifecycle: submission, the recruiter board and status transitions.

Two statements carry the concurrency guarantees here, both relying on the
atomicity of a single SQL statement rather than on application locks:

* submission is ``INSERT ... SELECT ... WHERE NOT EXISTS (unhandled application)``,
  backed by a partial unique index, so a person never has two unhandled
  applications;
* a status change is ``UPDATE ... WHERE id = :id AND status = :expected``, a
  compare-and-swap that detects a concurrent edit by another recruiter.
"""

import asyncio
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, func, insert, literal, select, update
from sqlalchemy.exc import IntegrityError

from recruitment.config import get_settings
from recruitment.errors import (
    ConflictingApplicationError,
    InvalidStatusTransitionError,
    NotFoundError,
    StatusConflictError,
)
from recruitment.models.application import STATUS_ACCEPTED, STATUS_REJECTED, STATUS_UNHANDLED, Application
from recruitment.models.availability import Availability
from recruitment.models.base import Database
from recruitment.models.competence import Competence, CompetenceProfile
from recruitment.models.user import Person
from recruitment.schemas import (
    ApplicantName,
    ApplicantOverview,
    ApplicationAnswer,
    ApplicationFullInformation,
    ApplicationPage,
    ApplicationPageRequest,
    ApplicationRecord,
    FullUserData,
    StatusTransitionRequest,
    validate_form,
)
from recruitment.services.activity_log import ClientInfo, LogLevel, log_activity
from recruitment.services.profile_service import list_availability, list_competences

DEFAULT_NO_COMPETENCES_TEXT = "No competences listed"
DEFAULT_NO_AVAILABILITY_TEXT = "No availability listed"


def _format_date(value: datetime) -> str:
    """YYYY-MM-DD of a timestamp, in UTC when the timestamp is zone-aware."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date().isoformat()


def _format_years(years: float) -> str:
    return f"{years:g}"


def is_transition_allowed(current_status: str, new_status: str, policy: str) -> bool:
    """Whether ``policy`` lets a recruiter move an application between statuses.

    "permissive" allows any status to any status. "one_way" only allows an
    unhandled application to become accepted or rejected.
    """
    if policy == "permissive":
        return True
    return current_status == STATUS_UNHANDLED and new_status in (STATUS_ACCEPTED, STATUS_REJECTED)


async def register_application(db: Database, user_id: int, client: ClientInfo | None = None) -> int:
    """Submit an application for ``user_id`` and return its id.

    Raises ConflictingApplicationError when the person already has an
    unhandled application.
    """
    pending = select(Application.application_id).where(
        Application.person_id == user_id,
        Application.status == STATUS_UNHANDLED,
    ).correlate(None)
    candidate = select(
        literal(user_id, Integer),
        literal(STATUS_UNHANDLED, String),
        literal(datetime.now(timezone.utc), DateTime(timezone=True)),
    ).where(~pending.exists())
    stmt = (
        insert(Application)
        .from_select(["person_id", "status", "created_at"], candidate, include_defaults=False)
        .returning(Application.application_id)
    )

    try:
        async with db.transaction() as session:
            result = await session.execute(stmt)
            application_id = result.scalar_one_or_none()
            if application_id is None:
                raise ConflictingApplicationError()
    except IntegrityError:
        # Lost a race against a concurrent submission
        raise ConflictingApplicationError() from None

    await log_activity(
        db, LogLevel.INFO, "APPLICATION_SUBMITTED",
        f"User ({user_id}) submitted application ({application_id}).",
        actor_id=user_id, client=client,
    )
    return application_id


async def get_applications_by_status(
    db: Database,
    status: str,
    limit: int,
    offset: int,
    no_competences_text: str = DEFAULT_NO_COMPETENCES_TEXT,
    no_availability_text: str = DEFAULT_NO_AVAILABILITY_TEXT,
) -> ApplicationPage:
    """One page of the recruiter board for ``status``, newest first."""
    form = validate_form(ApplicationPageRequest, {"status": status, "limit": limit, "offset": offset})

    async def fetch_page():
        async with db.session() as session:
            result = await session.execute(
                select(
                    Application.application_id,
                    Application.created_at,
                    Application.status,
                    Application.person_id,
                    Person.name,
                    Person.surname,
                    Person.username,
                    Person.email,
                )
                .join(Person, Person.person_id == Application.person_id)
                .where(Application.status == form.status)
                .order_by(Application.created_at.desc(), Application.application_id.desc())
                .limit(form.limit)
                .offset(form.offset)
            )
            return result.all()

    async def fetch_total():
        async with db.session() as session:
            result = await session.execute(
                select(func.count(Application.application_id)).where(Application.status == form.status)
            )
            return result.scalar_one()

    rows, total = await asyncio.gather(fetch_page(), fetch_total())
    competences, availability = await _summaries(db, {row.person_id for row in rows})

    applications = [
        ApplicationFullInformation(
            id=row.application_id,
            name=ApplicantName(first_name=row.name, last_name=row.surname),
            username=row.username,
            email=row.email,
            application_date=_format_date(row.created_at),
            status=row.status,
            answers=[
                ApplicationAnswer(
                    question="competences",
                    answer=competences.get(row.person_id) or no_competences_text,
                ),
                ApplicationAnswer(
                    question="availability",
                    answer=availability.get(row.person_id) or no_availability_text,
                ),
            ],
        )
        for row in rows
    ]
    return ApplicationPage(
        applications=applications,
        total=total,
        has_more=form.offset + len(applications) < total,
    )


async def _summaries(db: Database, person_ids: set[int]) -> tuple[dict[int, str], dict[int, str]]:
    """Human-readable competence and availability summaries per person."""
    if not person_ids:
        return {}, {}

    async def fetch_competences():
        async with db.session() as session:
            result = await session.execute(
                select(CompetenceProfile.person_id, Competence.name, CompetenceProfile.years_of_experience)
                .join(Competence, Competence.competence_id == CompetenceProfile.competence_id)
                .where(CompetenceProfile.person_id.in_(person_ids))
                .order_by(CompetenceProfile.person_id, Competence.name)
            )
            summary: dict[int, list[str]] = {}
            for row in result:
                summary.setdefault(row.person_id, []).append(
                    f"{row.name} ({_format_years(row.years_of_experience)} years)"
                )
            return {person_id: ", ".join(parts) for person_id, parts in summary.items()}

    async def fetch_availability():
        async with db.session() as session:
            result = await session.execute(
                select(Availability.person_id, Availability.from_date, Availability.to_date)
                .where(Availability.person_id.in_(person_ids))
                .order_by(Availability.person_id, Availability.from_date, Availability.to_date)
            )
            summary: dict[int, list[str]] = {}
            for row in result:
                summary.setdefault(row.person_id, []).append(
                    f"{row.from_date.isoformat()} to {row.to_date.isoformat()}"
                )
            return {person_id: ", ".join(parts) for person_id, parts in summary.items()}

    return await asyncio.gather(fetch_competences(), fetch_availability())


async def transition_status(
    db: Database,
    application_id: int,
    new_status: str,
    expected_status: str,
    actor_id: int | None = None,
    client: ClientInfo | None = None,
) -> ApplicationRecord:
    """Compare-and-swap the status of an application.

    The update only applies while the stored status still equals
    ``expected_status``. Otherwise StatusConflictError is raised and the
    caller has to refetch the application.
    """
    form = validate_form(StatusTransitionRequest, {"status": new_status, "current_status": expected_status})
    policy = get_settings().status_transition_policy
    if not is_transition_allowed(form.current_status, form.status, policy):
        raise InvalidStatusTransitionError()

    async with db.transaction() as session:
        result = await session.execute(
            update(Application)
            .where(
                Application.application_id == application_id,
                Application.status == form.current_status,
            )
            .values(status=form.status)
            .returning(
                Application.application_id,
                Application.person_id,
                Application.status,
                Application.created_at,
            )
            .execution_options(synchronize_session=False)
        )
        row = result.one_or_none()

    if row is None:
        await log_activity(
            db, LogLevel.INFO, "APPLICATION_STATUS_CONFLICT",
            f"Application ({application_id}) was no longer {form.current_status}; status not changed.",
            actor_id=actor_id, client=client,
        )
        raise StatusConflictError()

    await log_activity(
        db, LogLevel.INFO, "APPLICATION_STATUS_CHANGED",
        f"Application ({application_id}) changed from {form.current_status} to {form.status}.",
        actor_id=actor_id, client=client,
    )
    return ApplicationRecord(
        application_id=row.application_id,
        person_id=row.person_id,
        status=row.status,
        application_date=_format_date(row.created_at),
    )


async def get_submitted_application(db: Database, user_id: int) -> ApplicationRecord | None:
    """The person's most recent application, if any."""
    async with db.session() as session:
        result = await session.execute(
            select(Application.application_id, Application.person_id, Application.status, Application.created_at)
            .where(Application.person_id == user_id)
            .order_by(Application.created_at.desc(), Application.application_id.desc())
            .limit(1)
        )
        row = result.one_or_none()

    if row is None:
        return None
    return ApplicationRecord(
        application_id=row.application_id,
        person_id=row.person_id,
        status=row.status,
        application_date=_format_date(row.created_at),
    )


async def get_full_user_data(db: Database, user_id: int) -> FullUserData:
    async with db.session() as session:
        result = await session.execute(select(Person).where(Person.person_id == user_id))
        person = result.scalar_one_or_none()

    if person is None:
        raise NotFoundError()
    return FullUserData(
        id=person.person_id,
        username=person.username,
        role_id=person.role_id,
        email=person.email,
        first_name=person.name,
        last_name=person.surname,
        pnr=person.pnr,
    )


async def get_applicant_overview(db: Database, user_id: int, locale: str | None = None) -> ApplicantOverview:
    """Profile, competences, availability and latest application of one applicant."""
    user, competences, availability, application = await asyncio.gather(
        get_full_user_data(db, user_id),
        list_competences(db, user_id, locale),
        list_availability(db, user_id),
        get_submitted_application(db, user_id),
    )
    return ApplicantOverview(
        user=user,
        competences=competences,
        availability=availability,
        application=application,
    )
