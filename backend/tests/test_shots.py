import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from golftrack.api.deps import get_db
from golftrack.api.v1 import shots as shots_api
from golftrack.core.errors import ValidationError
from golftrack.db.base import Base
import golftrack.models  # noqa: F401
from golftrack.api.v1.shots import validate_shot
from golftrack.main import app

U1 = {"X-User-Id": "u1"}
U2 = {"X-User-Id": "u2"}

TEE = {"lat": 56.0430, "lng": 12.6950}
FAIRWAY = {"lat": 56.0452, "lng": 12.6950}


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


def _start_round(client, headers=U1):
    course = client.post(
        "/api/v1/courses",
        json={"name": "Shots GC", "holes": [{"number": i, "par": 4} for i in range(1, 10)]},
        headers=headers,
    )
    assert course.status_code == 201
    rnd = client.post("/api/v1/rounds", json={"course_id": course.json()["id"]}, headers=headers)
    assert rnd.status_code == 201
    return rnd.json()["id"], [h["id"] for h in course.json()["holes"]]


def _shot(hole_id, shot_number=1, **extra):
    body = {"hole_id": hole_id, "shot_number": shot_number, "club": "driver", "start_location": TEE}
    body.update(extra)
    return body


def _count_shots(client, round_id, headers=U1):
    resp = client.get("/api/v1/shots", params={"round_id": round_id}, headers=headers)
    assert resp.status_code == 200
    return resp.json()["pagination"]["total"]


def test_create_and_get_shot(client):
    round_id, holes = _start_round(client)

    resp = client.post(
        f"/api/v1/rounds/{round_id}/shots",
        json=_shot(holes[0], distance=250, end_location=FAIRWAY, result="fairway"),
        headers=U1,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["shot_number"] == 1
    assert data["club"] == "driver"
    assert data["start_location"] == TEE
    assert data["end_location"] == FAIRWAY
    assert data["measured_distance"] == pytest.approx(267.5, abs=1.0)
    assert data["hole"]["number"] == 1

    got = client.get(f"/api/v1/shots/{data['id']}", headers=U1)
    assert got.status_code == 200
    assert got.json()["id"] == data["id"]


def test_duplicate_shot_number_conflicts(client):
    round_id, holes = _start_round(client)
    assert client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(holes[0]), headers=U1).status_code == 201

    resp = client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(holes[0]), headers=U1)
    assert resp.status_code == 409
    assert resp.json()["code"] == "DUPLICATE_SHOT_NUMBER"
    assert resp.json()["field"] == "shot_number"
    assert "Shot number 1 already exists" in resp.json()["detail"]

    # Same number on a different hole is fine.
    other = client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(holes[1]), headers=U1)
    assert other.status_code == 201
    assert _count_shots(client, round_id) == 2


@pytest.mark.parametrize(
    "extra,field",
    [
        ({"shot_number": 0}, "shot_number"),
        ({"shot_number": 21}, "shot_number"),
        ({"club": "spoon"}, "club"),
        ({"distance": 501}, "distance"),
        ({"distance": -1}, "distance"),
        ({"start_location": {"lat": 91, "lng": 0}}, "start_location.lat"),
        ({"end_location": {"lat": 0, "lng": 181}}, "end_location.lng"),
        ({"result": "lost"}, "result"),
        ({"notes": "x" * 501}, "notes"),
    ],
)
def test_invalid_shot_is_rejected_with_field(client, extra, field):
    round_id, holes = _start_round(client)
    resp = client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(holes[0], **extra), headers=U1)
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert resp.json()["field"] == field
    assert _count_shots(client, round_id) == 0


def test_validate_shot_without_database():
    ok = validate_shot(_shot(7, shot_number=3, distance=0, result="hole"))
    assert ok.shot_number == 3

    with pytest.raises(ValidationError) as exc:
        validate_shot(_shot(7, distance=500.5))
    assert exc.value.field == "distance"


def test_shot_for_other_players_round_is_not_found(client):
    round_id, holes = _start_round(client)
    resp = client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(holes[0]), headers=U2)
    assert resp.status_code == 404
    assert resp.json()["code"] == "ROUND_NOT_FOUND"


def test_shot_for_unknown_hole_is_not_found(client):
    round_id, _holes = _start_round(client)
    resp = client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(99999), headers=U1)
    assert resp.status_code == 404
    assert resp.json()["code"] == "HOLE_NOT_FOUND"


def test_batch_create(client):
    round_id, holes = _start_round(client)
    resp = client.post(
        f"/api/v1/rounds/{round_id}/shots/batch",
        json={
            "shots": [
                _shot(holes[0], 1, result="fairway", distance=245),
                _shot(holes[0], 2, club="8-iron", result="green", distance=140),
                _shot(holes[1], 1, result="rough"),
            ]
        },
        headers=U1,
    )
    assert resp.status_code == 201
    assert resp.json() == {"count": 3}
    assert _count_shots(client, round_id) == 3


def test_batch_with_repeated_shot_number_persists_nothing(client):
    round_id, holes = _start_round(client)
    resp = client.post(
        f"/api/v1/rounds/{round_id}/shots/batch",
        json={"shots": [_shot(holes[0], 1), _shot(holes[0], 1, club="3-wood")]},
        headers=U1,
    )
    assert resp.status_code == 400
    assert resp.json()["field"] == "shots"
    assert "Duplicate shot numbers" in resp.json()["detail"]
    assert _count_shots(client, round_id) == 0


def test_batch_with_one_invalid_shot_persists_nothing(client):
    round_id, holes = _start_round(client)
    resp = client.post(
        f"/api/v1/rounds/{round_id}/shots/batch",
        json={"shots": [_shot(holes[0], 1), _shot(holes[0], 2, distance=600)]},
        headers=U1,
    )
    assert resp.status_code == 400
    assert resp.json()["field"] == "shots.1.distance"
    assert _count_shots(client, round_id) == 0


@pytest.mark.parametrize("size", [0, 51])
def test_batch_size_limits(client, size):
    round_id, holes = _start_round(client)
    shots = [_shot(holes[i % 9], i // 9 + 1) for i in range(size)]
    resp = client.post(f"/api/v1/rounds/{round_id}/shots/batch", json={"shots": shots}, headers=U1)
    assert resp.status_code == 400
    assert resp.json()["field"] == "shots"
    assert _count_shots(client, round_id) == 0


def test_batch_of_fifty_is_accepted(client):
    round_id, holes = _start_round(client)
    shots = [_shot(holes[i % 9], i // 9 + 1) for i in range(50)]
    resp = client.post(f"/api/v1/rounds/{round_id}/shots/batch", json={"shots": shots}, headers=U1)
    assert resp.status_code == 201
    assert resp.json()["count"] == 50


def test_batch_colliding_with_stored_shot_persists_nothing(client):
    round_id, holes = _start_round(client)
    client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(holes[0], 1), headers=U1)

    resp = client.post(
        f"/api/v1/rounds/{round_id}/shots/batch",
        json={"shots": [_shot(holes[0], 2), _shot(holes[0], 1)]},
        headers=U1,
    )
    assert resp.status_code == 409
    assert resp.json()["code"] == "DUPLICATE_SHOT_NUMBER"
    assert _count_shots(client, round_id) == 1


def test_batch_with_hole_from_another_course(client):
    round_id, holes = _start_round(client)
    _other, other_holes = _start_round(client)
    resp = client.post(
        f"/api/v1/rounds/{round_id}/shots/batch",
        json={"shots": [_shot(holes[0]), _shot(other_holes[0])]},
        headers=U1,
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "HOLE_NOT_FOUND"
    assert _count_shots(client, round_id) == 0


def test_update_shot_keeps_omitted_fields(client):
    round_id, holes = _start_round(client)
    shot = client.post(
        f"/api/v1/rounds/{round_id}/shots",
        json=_shot(holes[0], distance=230, result="rough", notes="pulled"),
        headers=U1,
    ).json()

    resp = client.patch(f"/api/v1/shots/{shot['id']}", json={"result": "fairway"}, headers=U1)
    assert resp.status_code == 200
    data = resp.json()
    assert data["result"] == "fairway"
    assert data["club"] == "driver"
    assert data["distance"] == 230
    assert data["notes"] == "pulled"

    bad = client.patch(f"/api/v1/shots/{shot['id']}", json={"distance": 900}, headers=U1)
    assert bad.status_code == 400
    assert bad.json()["field"] == "distance"


def test_delete_shot(client):
    round_id, holes = _start_round(client)
    shot = client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(holes[0]), headers=U1).json()

    assert client.delete(f"/api/v1/shots/{shot['id']}", headers=U2).status_code == 404
    assert client.delete(f"/api/v1/shots/{shot['id']}", headers=U1).json() == {"ok": True}

    missing = client.get(f"/api/v1/shots/{shot['id']}", headers=U1)
    assert missing.status_code == 404
    assert missing.json()["code"] == "SHOT_NOT_FOUND"


def test_list_shots_filters_and_pagination(client):
    round_id, holes = _start_round(client)
    client.post(
        f"/api/v1/rounds/{round_id}/shots/batch",
        json={
            "shots": [
                _shot(holes[0], 1, result="fairway"),
                _shot(holes[0], 2, club="7-iron", result="green"),
                _shot(holes[1], 1, result="rough"),
                _shot(holes[1], 2, club="7-iron", result="bunker"),
            ]
        },
        headers=U1,
    )

    by_club = client.get("/api/v1/shots", params={"club": "7-iron"}, headers=U1).json()
    assert by_club["pagination"]["total"] == 2
    assert {s["result"] for s in by_club["items"]} == {"green", "bunker"}

    by_hole = client.get("/api/v1/shots", params={"hole_id": holes[1]}, headers=U1).json()
    assert [s["shot_number"] for s in by_hole["items"]] == [1, 2]

    page = client.get("/api/v1/shots", params={"limit": 3}, headers=U1).json()
    assert len(page["items"]) == 3
    assert page["pagination"]["has_more"] is True
    assert [(s["hole"]["number"], s["shot_number"]) for s in page["items"]] == [(1, 1), (1, 2), (2, 1)]

    # Shots belong to their player.
    assert client.get("/api/v1/shots", headers=U2).json()["pagination"]["total"] == 0


def test_shot_statistics_endpoint(client):
    round_id, holes = _start_round(client)
    client.post(
        f"/api/v1/rounds/{round_id}/shots/batch",
        json={
            "shots": [
                _shot(holes[0], 1, distance=250, result="fairway"),
                _shot(holes[0], 2, club="7-iron", distance=150, result="green"),
            ]
        },
        headers=U1,
    )

    resp = client.get("/api/v1/shots/statistics", params={"round_id": round_id}, headers=U1)
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["total_shots"] == 2
    assert stats["average_distance"] == 200
    assert stats["accuracy"] == {"fairways_hit": 1, "greens_in_regulation": 1, "total": 2}
    assert stats["club_stats"]["driver"] == {"count": 1, "average_distance": 250, "accuracy": 100}
    assert stats["result_breakdown"] == {"fairway": 1, "green": 1}

    driver_only = client.get("/api/v1/shots/statistics", params={"club": "driver"}, headers=U1).json()
    assert driver_only["total_shots"] == 1


def test_storage_constraint_rejects_shot_number_taken_after_check(client, monkeypatch):
    round_id, holes = _start_round(client)
    assert client.post(f"/api/v1/rounds/{round_id}/shots", json=_shot(holes[0]), headers=U1).status_code == 201

    # A concurrent insert lands between the duplicate check and the commit.
    monkeypatch.setattr(shots_api, "_shot_number_taken", lambda *_args: False)
    resp = client.post(
        f"/api/v1/rounds/{round_id}/shots",
        json=_shot(holes[0], club="3-wood"),
        headers=U1,
    )
    assert resp.status_code == 409
    assert resp.json()["code"] == "DUPLICATE_SHOT_NUMBER"
    assert resp.json()["field"] == "shot_number"

    monkeypatch.undo()
    stored = client.get("/api/v1/shots", params={"round_id": round_id}, headers=U1).json()
    assert stored["pagination"]["total"] == 1
    assert stored["items"][0]["club"] == "driver"
