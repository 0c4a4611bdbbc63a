import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from golftrack.api.deps import get_db
from golftrack.db.base import Base
import golftrack.models  # noqa: F401
from golftrack.main import app


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _course_payload(name="My Course", holes=9, **extra):
    payload = {
        "name": name,
        "holes": [{"number": i, "par": 4, "yardage": 350, "hcp": i} for i in range(1, holes + 1)],
    }
    payload.update(extra)
    return payload


def test_create_and_list_courses(client):
    resp = client.post(
        "/api/v1/courses",
        json=_course_payload(city="Helsingborg", state="sk", rating=71.2, slope=128),
        headers={"X-User-Id": "u1"},
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "My Course"
    assert data["state"] == "SK"
    assert data["owner_id"] == "u1"
    assert data["total_par"] == 36
    assert len(data["holes"]) == 9

    resp2 = client.get("/api/v1/courses", headers={"X-User-Id": "u1"})
    assert resp2.status_code == 200
    courses = resp2.json()["items"]
    assert len(courses) == 1
    assert courses[0]["name"] == "My Course"

    # Courses are global/readable by any user.
    resp_other = client.get("/api/v1/courses", headers={"X-User-Id": "u2"})
    assert resp_other.status_code == 200
    assert len(resp_other.json()["items"]) == 1

    get_other = client.get(f"/api/v1/courses/{data['id']}", headers={"X-User-Id": "u2"})
    assert get_other.status_code == 200

    # But only the creator can delete (archive).
    d_forbidden = client.delete(f"/api/v1/courses/{data['id']}", headers={"X-User-Id": "u2"})
    assert d_forbidden.status_code == 403
    assert d_forbidden.json()["code"] == "INSUFFICIENT_PERMISSIONS"

    d_ok = client.delete(f"/api/v1/courses/{data['id']}", headers={"X-User-Id": "u1"})
    assert d_ok.status_code == 200

    after = client.get("/api/v1/courses", headers={"X-User-Id": "u1"})
    assert after.json()["items"] == []
    gone = client.get(f"/api/v1/courses/{data['id']}", headers={"X-User-Id": "u1"})
    assert gone.status_code == 404
    assert gone.json()["code"] == "COURSE_NOT_FOUND"


def test_search_courses(client):
    headers = {"X-User-Id": "u1"}
    client.post("/api/v1/courses", json=_course_payload("Pebble Beach", city="Monterey", state="CA"), headers=headers)
    client.post("/api/v1/courses", json=_course_payload("Torrey Pines", city="San Diego", state="CA"), headers=headers)
    client.post("/api/v1/courses", json=_course_payload("Bethpage Black", city="Farmingdale", state="NY"), headers=headers)

    by_name = client.get("/api/v1/courses", params={"query": "pebble"}, headers=headers).json()
    assert [c["name"] for c in by_name["items"]] == ["Pebble Beach"]

    by_state = client.get("/api/v1/courses", params={"state": "ca"}, headers=headers).json()
    assert by_state["pagination"]["total"] == 2

    by_city = client.get("/api/v1/courses", params={"city": "san diego"}, headers=headers).json()
    assert [c["name"] for c in by_city["items"]] == ["Torrey Pines"]

    page = client.get("/api/v1/courses", params={"limit": 2}, headers=headers).json()
    assert len(page["items"]) == 2
    assert page["pagination"]["has_more"] is True


def test_course_with_active_round_cannot_be_archived(client):
    headers = {"X-User-Id": "u1"}
    course = client.post("/api/v1/courses", json=_course_payload(), headers=headers).json()
    rnd = client.post("/api/v1/rounds", json={"course_id": course["id"]}, headers=headers).json()

    busy = client.delete(f"/api/v1/courses/{course['id']}", headers=headers)
    assert busy.status_code == 409
    assert busy.json()["code"] == "COURSE_IN_USE"

    client.patch(f"/api/v1/rounds/{rnd['id']}", json={"end_time": "2026-05-01T12:00:00Z"}, headers=headers)
    assert client.delete(f"/api/v1/courses/{course['id']}", headers=headers).status_code == 200

    # Archived courses cannot host new rounds.
    again = client.post("/api/v1/rounds", json={"course_id": course["id"]}, headers=headers)
    assert again.status_code == 404


@pytest.mark.parametrize(
    "payload,field",
    [
        (_course_payload(holes=8), "holes"),
        ({"name": "Dupes", "holes": [{"number": 1, "par": 4}] * 9}, "holes"),
        (_course_payload(slope=200), "slope"),
        (_course_payload(state="CAL"), "state"),
        ({"name": "Par 7", "holes": [{"number": i, "par": 7} for i in range(1, 10)]}, "holes.0.par"),
    ],
)
def test_create_course_validation(client, payload, field):
    resp = client.post("/api/v1/courses", json=payload, headers={"X-User-Id": "u1"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert resp.json()["field"] == field


def test_eighteen_hole_course(client):
    resp = client.post("/api/v1/courses", json=_course_payload(holes=18), headers={"X-User-Id": "u1"})
    assert resp.status_code == 201
    assert resp.json()["total_par"] == 72
    assert [h["number"] for h in resp.json()["holes"]] == list(range(1, 19))
