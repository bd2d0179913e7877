from datetime import date

import pytest

from recruitment.errors import InvalidFormDataError, NotFoundError
from recruitment.main import seed_competences
from recruitment.services.profile_service import (
    add_availability,
    delete_availability,
    delete_competence,
    list_availability,
    list_catalog,
    list_competences,
    set_competence,
    update_availability,
)

from conftest import CATALOG, create_applicant


@pytest.mark.asyncio
async def test_catalog_falls_back_to_canonical_names(db):
    catalog = await list_catalog(db, "sv")

    assert [(c.id, c.name) for c in catalog] == [
        (1, "biljettförsäljning"),
        (2, "lotteries"),
        (3, "roller coaster operation"),
    ]


@pytest.mark.asyncio
async def test_seeding_the_catalog_is_idempotent(db):
    added = await seed_competences(db, {**CATALOG, 4: ("carousel operation", {"sv": "karusellskötsel"})})

    assert added == 1
    assert [c.name for c in await list_catalog(db, "sv")][-1] == "karusellskötsel"


@pytest.mark.asyncio
async def test_catalog_rejects_malformed_locale(db):
    with pytest.raises(InvalidFormDataError):
        await list_catalog(db, "swe")


@pytest.mark.asyncio
async def test_set_competence_overwrites_years(db):
    user_id, _ = await create_applicant(db, "alice")

    await set_competence(db, user_id, 1, 3)
    await set_competence(db, user_id, 1, 5)

    competences = await list_competences(db, user_id)
    assert len(competences) == 1
    assert competences[0].id == 1
    assert competences[0].years_of_experience == 5


@pytest.mark.asyncio
async def test_list_competences_translates_names(db):
    user_id, _ = await create_applicant(db, "alice")
    await set_competence(db, user_id, 1, 2.5)
    await set_competence(db, user_id, 2, 1)

    names = {c.id: c.name for c in await list_competences(db, user_id, "sv")}

    assert names == {1: "biljettförsäljning", 2: "lotteries"}


@pytest.mark.asyncio
@pytest.mark.parametrize("competence_id, years", [(1, 0), (1, -2), (1, 100), (99, 2)])
async def test_set_competence_rejects_invalid_input(db, competence_id, years):
    user_id, _ = await create_applicant(db, "alice")

    with pytest.raises(InvalidFormDataError):
        await set_competence(db, user_id, competence_id, years)
    assert await list_competences(db, user_id) == []


@pytest.mark.asyncio
async def test_delete_competence_removes_own_entry(db):
    user_id, _ = await create_applicant(db, "alice")
    await set_competence(db, user_id, 2, 4)
    [entry] = await list_competences(db, user_id)

    await delete_competence(db, user_id, entry.competence_profile_id)

    assert await list_competences(db, user_id) == []


@pytest.mark.asyncio
async def test_cannot_delete_someone_elses_competence(db):
    alice_id, _ = await create_applicant(db, "alice", 1)
    bob_id, _ = await create_applicant(db, "bob", 2)
    await set_competence(db, bob_id, 2, 4)
    [bobs] = await list_competences(db, bob_id)

    with pytest.raises(NotFoundError):
        await delete_competence(db, alice_id, bobs.competence_profile_id)
    assert await list_competences(db, bob_id) == [bobs]


@pytest.mark.asyncio
async def test_add_availability_rejects_reversed_range(db):
    user_id, _ = await create_applicant(db, "alice")

    with pytest.raises(InvalidFormDataError):
        await add_availability(db, user_id, "2025-06-10", "2025-06-01")
    assert await list_availability(db, user_id) == []


@pytest.mark.asyncio
async def test_single_day_availability_is_allowed(db):
    user_id, _ = await create_applicant(db, "alice")

    availability_id = await add_availability(db, user_id, "2025-06-01", "2025-06-01")

    [entry] = await list_availability(db, user_id)
    assert entry.availability_id == availability_id
    assert entry.from_date == entry.to_date == date(2025, 6, 1)


@pytest.mark.asyncio
async def test_list_availability_is_ordered(db):
    user_id, _ = await create_applicant(db, "alice")
    late = await add_availability(db, user_id, "2025-08-01", "2025-08-31")
    long = await add_availability(db, user_id, "2025-06-01", "2025-07-31")
    short = await add_availability(db, user_id, "2025-06-01", "2025-06-15")

    ordered = [entry.availability_id for entry in await list_availability(db, user_id)]

    assert ordered == [short, long, late]


@pytest.mark.asyncio
async def test_update_availability(db):
    user_id, _ = await create_applicant(db, "alice")
    availability_id = await add_availability(db, user_id, "2025-06-01", "2025-06-15")

    await update_availability(db, user_id, availability_id, "2025-07-01", "2025-07-15")

    [entry] = await list_availability(db, user_id)
    assert (entry.from_date, entry.to_date) == (date(2025, 7, 1), date(2025, 7, 15))


@pytest.mark.asyncio
async def test_update_availability_rejects_reversed_range(db):
    user_id, _ = await create_applicant(db, "alice")
    availability_id = await add_availability(db, user_id, "2025-06-01", "2025-06-15")

    with pytest.raises(InvalidFormDataError):
        await update_availability(db, user_id, availability_id, "2025-07-15", "2025-07-01")

    [entry] = await list_availability(db, user_id)
    assert entry.from_date == date(2025, 6, 1)


@pytest.mark.asyncio
async def test_cannot_touch_someone_elses_availability(db):
    alice_id, _ = await create_applicant(db, "alice", 1)
    bob_id, _ = await create_applicant(db, "bob", 2)
    availability_id = await add_availability(db, bob_id, "2025-06-01", "2025-06-15")

    with pytest.raises(NotFoundError):
        await update_availability(db, alice_id, availability_id, "2025-07-01", "2025-07-15")
    with pytest.raises(NotFoundError):
        await delete_availability(db, alice_id, availability_id)

    [entry] = await list_availability(db, bob_id)
    assert entry.from_date == date(2025, 6, 1)


@pytest.mark.asyncio
async def test_delete_availability(db):
    user_id, _ = await create_applicant(db, "alice")
    availability_id = await add_availability(db, user_id, "2025-06-01", "2025-06-15")

    await delete_availability(db, user_id, availability_id)

    assert await list_availability(db, user_id) == []
    with pytest.raises(NotFoundError):
        await delete_availability(db, user_id, availability_id)
