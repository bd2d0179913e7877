import pytest
from fastapi.testclient import TestClient

from recruitment.main import create_app

from conftest import PASSWORD, new_user_payload, promote_to_recruiter, seed_catalog

API = "/api/v1"


@pytest.fixture
def client():
    app = create_app()
    with TestClient(app) as test_client:
        test_client.portal.call(seed_catalog, app.state.db)
        yield test_client


def signup(client: TestClient, username: str, number: int = 1) -> int:
    response = client.post(f"{API}/auth/signup", json=new_user_payload(username, number))
    assert response.status_code == 201
    return response.json()["userID"]


def login(client: TestClient, username: str, password: str = PASSWORD):
    return client.post(f"{API}/auth/login", json={"username": username, "password": password})


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
    detailed = client.get("/health/detailed").json()
    assert detailed["checks"]["database"]["ok"] is True


def test_signup_sets_session_cookie(client):
    user_id = signup(client, "alice")

    assert client.cookies.get("session")
    response = client.post(f"{API}/auth/whoami")
    assert response.status_code == 200
    assert response.json() == {"id": user_id, "username": "alice", "role_id": 2, "role": "applicant"}


def test_whoami_without_session_is_no_content(client):
    assert client.post(f"{API}/auth/whoami").status_code == 204


def test_signup_with_invalid_body_is_bad_request(client):
    payload = new_user_payload("alice")
    payload["pnr"] = "123"

    response = client.post(f"{API}/auth/signup", json=payload)

    assert response.status_code == 400
    assert response.json()["kind"] == "invalid_form_data"


def test_duplicate_signup_conflicts(client):
    signup(client, "alice")

    response = client.post(f"{API}/auth/signup", json=new_user_payload("alice", 2))

    assert response.status_code == 409
    assert response.json()["kind"] == "conflicting_signup_data"


def test_login_and_logout(client):
    signup(client, "alice")
    client.cookies.clear()

    wrong = login(client, "alice", "Wrong1234")
    assert wrong.status_code == 401
    assert login(client, "ghost").json() == wrong.json()

    response = login(client, "alice")
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    assert client.get(f"{API}/auth/logout").json() == {"loggedOut": True}
    assert client.post(f"{API}/auth/whoami").status_code == 204


def test_protected_routes_require_session(client):
    response = client.get(f"{API}/application/availability")

    assert response.status_code == 401
    assert response.json()["kind"] == "invalid_session"


def test_profile_editing(client):
    signup(client, "alice")

    response = client.post(f"{API}/application/competences", json={"competence_id": 1, "years_of_experience": 3})
    assert response.status_code == 200
    client.post(f"{API}/application/competences", json={"competence_id": 1, "years_of_experience": 5})
    [competence] = client.get(f"{API}/application/competences").json()
    assert competence["years_of_experience"] == 5

    created = client.post(
        f"{API}/application/availability", json={"from_date": "2025-06-01", "to_date": "2025-06-30"}
    )
    availability_id = created.json()["availabilityID"]
    reversed_range = client.post(
        f"{API}/application/availability", json={"from_date": "2025-06-30", "to_date": "2025-06-01"}
    )
    assert reversed_range.status_code == 400

    details = client.get(f"{API}/application/details", params={"locale": "sv"}).json()
    assert details["competences"][0]["name"] == "biljettförsäljning"
    assert [a["availability_id"] for a in details["availability"]] == [availability_id]
    assert details["application"] is None

    missing = client.post(f"{API}/application/availability/delete", json={"availability_id": availability_id + 1})
    assert missing.status_code == 400
    assert missing.json()["kind"] == "not_found"


def test_catalog(client):
    signup(client, "alice")

    response = client.post(f"{API}/application/competences/catalog", json={"locale": "en"})

    assert [c["name"] for c in response.json()] == ["ticket sales", "lotteries", "roller coaster operation"]


def test_submit_twice_conflicts(client):
    signup(client, "alice")

    first = client.post(f"{API}/application/submit")
    second = client.post(f"{API}/application/submit")

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["kind"] == "conflicting_application"
    submitted = client.get(f"{API}/application/submitted").json()
    assert submitted["application_id"] == first.json()["applicationID"]
    assert submitted["status"] == "unhandled"


def test_board_is_recruiter_only(client):
    signup(client, "alice")

    response = client.get(f"{API}/admin/applications", params={"status": "unhandled"})

    assert response.status_code == 403


def test_recruiter_reviews_applications(client):
    signup(client, "alice", 1)
    application_id = client.post(f"{API}/application/submit").json()["applicationID"]
    recruiter_id = signup(client, "recruiter", 2)
    client.portal.call(promote_to_recruiter, client.app.state.db, recruiter_id)

    board = client.get(f"{API}/admin/applications", params={"status": "unhandled"}).json()
    assert board["total"] == 1
    assert board["has_more"] is False
    assert board["applications"][0]["id"] == application_id

    body = {"status": "accepted", "current_status": "unhandled"}
    accepted = client.patch(f"{API}/admin/applications/{application_id}", json=body)
    assert accepted.status_code == 200
    assert accepted.json()["application"]["status"] == "accepted"

    stale = client.patch(f"{API}/admin/applications/{application_id}", json=body)
    assert stale.status_code == 409
    assert stale.json()["kind"] == "status_conflict"

    invalid = client.patch(
        f"{API}/admin/applications/{application_id}", json={"status": "pending", "current_status": "accepted"}
    )
    assert invalid.status_code == 400


def test_credential_reset(client):
    signup(client, "alice")
    client.cookies.clear()

    token = client.post(f"{API}/reset-credentials", json={"email": "alice@recruit.se"}).json()["token"]
    assert client.post(f"{API}/reset-credentials/validate", json={"token": token}).json() == {"valid": True}
    updated = client.post(f"{API}/reset-credentials/update", json={"token": token, "password": "Brandnew99"})
    assert updated.status_code == 200

    assert login(client, "alice", "Brandnew99").status_code == 200
    assert client.post(f"{API}/reset-credentials/validate", json={"token": token}).status_code == 404
