"""Profile store: a person's competences and availability ranges.

Every mutation filters on the owning person in the same statement as the
target id, so a row owned by someone else behaves exactly like a missing row.
"""

from datetime import date

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from recruitment.errors import InvalidFormDataError, NotFoundError
from recruitment.models.availability import Availability
from recruitment.models.base import Database
from recruitment.models.competence import Competence, CompetenceProfile, CompetenceTranslation
from recruitment.schemas import (
    AvailabilityRange,
    AvailabilityUpdate,
    CatalogCompetence,
    CompetenceListRequest,
    DeleteAvailabilityRequest,
    DeleteCompetenceRequest,
    SetCompetenceRequest,
    UserAvailability,
    UserCompetence,
    validate_form,
)
from recruitment.services.activity_log import ClientInfo, LogLevel, log_activity


def _localized_name(locale: str | None):
    """Catalog name in ``locale``, falling back to the canonical name."""
    if locale is None:
        return Competence.name, None
    onclause = and_(
        CompetenceTranslation.competence_id == Competence.competence_id,
        CompetenceTranslation.locale == locale,
    )
    return func.coalesce(CompetenceTranslation.name, Competence.name), onclause


# --- Competences ---

async def list_catalog(db: Database, locale: str) -> list[CatalogCompetence]:
    """All catalog competences, translated where a translation exists."""
    locale = validate_form(CompetenceListRequest, {"locale": locale}).locale
    name, onclause = _localized_name(locale)
    async with db.session() as session:
        result = await session.execute(
            select(Competence.competence_id, name.label("name"))
            .select_from(Competence)
            .outerjoin(CompetenceTranslation, onclause)
            .order_by(Competence.competence_id)
        )
        return [CatalogCompetence(id=row.competence_id, name=row.name) for row in result]


async def list_competences(db: Database, user_id: int, locale: str | None = None) -> list[UserCompetence]:
    """Competences in the person's profile. Row order is not part of the contract."""
    name, onclause = _localized_name(locale)
    query = (
        select(
            CompetenceProfile.competence_profile_id,
            CompetenceProfile.competence_id,
            CompetenceProfile.years_of_experience,
            name.label("name"),
        )
        .select_from(CompetenceProfile)
        .join(Competence, Competence.competence_id == CompetenceProfile.competence_id)
        .where(CompetenceProfile.person_id == user_id)
    )
    if onclause is not None:
        query = query.outerjoin(CompetenceTranslation, onclause)

    async with db.session() as session:
        result = await session.execute(query)
        return [
            UserCompetence(
                id=row.competence_id,
                name=row.name,
                competence_profile_id=row.competence_profile_id,
                years_of_experience=row.years_of_experience,
            )
            for row in result
        ]


async def set_competence(
    db: Database,
    user_id: int,
    competence_id: int,
    years_of_experience: float,
    client: ClientInfo | None = None,
) -> None:
    """Add a competence to the profile, or overwrite the years of an existing one."""
    form = validate_form(
        SetCompetenceRequest,
        {"competence_id": competence_id, "years_of_experience": years_of_experience},
    )

    stmt = db.insert(CompetenceProfile).values(
        person_id=user_id,
        competence_id=form.competence_id,
        years_of_experience=form.years_of_experience,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[CompetenceProfile.person_id, CompetenceProfile.competence_id],
        set_={"years_of_experience": stmt.excluded.years_of_experience},
    )

    try:
        async with db.transaction() as session:
            await session.execute(stmt)
    except IntegrityError:
        # Unknown competence id
        raise InvalidFormDataError() from None

    await log_activity(
        db, LogLevel.INFO, "COMPETENCE_SET",
        f"User ({user_id}) set competence ({form.competence_id}) to {form.years_of_experience} years.",
        actor_id=user_id, client=client,
    )


async def delete_competence(
    db: Database, user_id: int, competence_profile_id: int, client: ClientInfo | None = None
) -> None:
    form = validate_form(DeleteCompetenceRequest, {"competence_profile_id": competence_profile_id})

    async with db.transaction() as session:
        result = await session.execute(
            delete(CompetenceProfile)
            .where(
                CompetenceProfile.competence_profile_id == form.competence_profile_id,
                CompetenceProfile.person_id == user_id,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError()

    await log_activity(
        db, LogLevel.INFO, "COMPETENCE_DELETED",
        f"User ({user_id}) deleted competence profile ({form.competence_profile_id}).",
        actor_id=user_id, client=client,
    )


# --- Availability ---

async def list_availability(db: Database, user_id: int) -> list[UserAvailability]:
    """Availability ranges ordered by from date, then to date, then id."""
    async with db.session() as session:
        result = await session.execute(
            select(Availability.availability_id, Availability.from_date, Availability.to_date)
            .where(Availability.person_id == user_id)
            .order_by(Availability.from_date, Availability.to_date, Availability.availability_id)
        )
        return [
            UserAvailability(
                availability_id=row.availability_id,
                from_date=row.from_date,
                to_date=row.to_date,
            )
            for row in result
        ]


async def add_availability(
    db: Database,
    user_id: int,
    from_date: date | str,
    to_date: date | str,
    client: ClientInfo | None = None,
) -> int:
    """Insert a new availability range and return its id.

    A range ending before it starts is rejected by the datastore check
    constraint and reported as InvalidFormDataError.
    """
    form = validate_form(AvailabilityRange, {"from_date": from_date, "to_date": to_date})

    try:
        async with db.transaction() as session:
            result = await session.execute(
                insert(Availability)
                .values(person_id=user_id, from_date=form.from_date, to_date=form.to_date)
                .returning(Availability.availability_id)
            )
            availability_id = result.scalar_one()
    except IntegrityError:
        raise InvalidFormDataError() from None

    await log_activity(
        db, LogLevel.INFO, "AVAILABILITY_ADDED",
        f"User ({user_id}) added availability ({availability_id}) {form.from_date} to {form.to_date}.",
        actor_id=user_id, client=client,
    )
    return availability_id


async def update_availability(
    db: Database,
    user_id: int,
    availability_id: int,
    from_date: date | str,
    to_date: date | str,
    client: ClientInfo | None = None,
) -> None:
    form = validate_form(
        AvailabilityUpdate,
        {"availability_id": availability_id, "from_date": from_date, "to_date": to_date},
    )

    try:
        async with db.transaction() as session:
            result = await session.execute(
                update(Availability)
                .where(
                    Availability.availability_id == form.availability_id,
                    Availability.person_id == user_id,
                )
                .values(from_date=form.from_date, to_date=form.to_date)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError()
    except IntegrityError:
        raise InvalidFormDataError() from None

    await log_activity(
        db, LogLevel.INFO, "AVAILABILITY_UPDATED",
        f"User ({user_id}) updated availability ({form.availability_id}) to {form.from_date} to {form.to_date}.",
        actor_id=user_id, client=client,
    )


async def delete_availability(
    db: Database, user_id: int, availability_id: int, client: ClientInfo | None = None
) -> None:
    form = validate_form(DeleteAvailabilityRequest, {"availability_id": availability_id})

    async with db.transaction() as session:
        result = await session.execute(
            delete(Availability)
            .where(
                Availability.availability_id == form.availability_id,
                Availability.person_id == user_id,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError()

    await log_activity(
        db, LogLevel.INFO, "AVAILABILITY_DELETED",
        f"User ({user_id}) deleted availability ({form.availability_id}).",
        actor_id=user_id, client=client,
    )
