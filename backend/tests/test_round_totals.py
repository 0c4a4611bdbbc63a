import logging

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from golftrack.db.base import Base
from golftrack.golf import totals
from golftrack.golf.totals import recalculate_round_score, refresh_round_score
from golftrack.models import Course, Hole, HoleScore, Player, Round


@pytest.fixture()
def db():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def round_with_holes(db):
    player = Player(external_id="u1")
    db.add(player)
    db.flush()

    course = Course(owner_player_id=player.id, name="Totals GC")
    course.holes = [Hole(number=i, par=4) for i in range(1, 10)]
    db.add(course)
    db.flush()

    rnd = Round(player_id=player.id, course_id=course.id)
    db.add(rnd)
    db.commit()
    return rnd, course.holes


def _score(db, rnd, hole, strokes):
    hs = HoleScore(round_id=rnd.id, hole_id=hole.id, player_id=rnd.player_id, score=strokes)
    db.add(hs)
    db.commit()
    return hs


def test_round_without_hole_scores_has_no_total(db, round_with_holes):
    rnd, _holes = round_with_holes
    assert recalculate_round_score(db, rnd.id) is None
    db.refresh(rnd)
    assert rnd.score is None


def test_total_is_sum_of_hole_scores(db, round_with_holes):
    rnd, holes = round_with_holes
    _score(db, rnd, holes[0], 4)
    _score(db, rnd, holes[1], 5)

    assert recalculate_round_score(db, rnd.id) == 9
    db.refresh(rnd)
    assert rnd.score == 9


def test_recalculating_twice_gives_same_total(db, round_with_holes):
    rnd, holes = round_with_holes
    for hole, strokes in zip(holes, [4, 3, 6, 5]):
        _score(db, rnd, hole, strokes)

    first = recalculate_round_score(db, rnd.id)
    second = recalculate_round_score(db, rnd.id)
    assert first == second == 18


def test_total_goes_back_to_none_when_last_score_removed(db, round_with_holes):
    rnd, holes = round_with_holes
    hs = _score(db, rnd, holes[0], 4)
    assert recalculate_round_score(db, rnd.id) == 4

    db.delete(hs)
    db.commit()
    assert recalculate_round_score(db, rnd.id) is None


def test_unknown_round_is_ignored(db):
    assert recalculate_round_score(db, 999) is None


def test_refresh_swallows_and_logs_failures(db, round_with_holes, monkeypatch, caplog):
    rnd, holes = round_with_holes
    _score(db, rnd, holes[0], 4)

    def broken(_db, _round_id):
        raise OperationalError("UPDATE rounds", {}, Exception("database is locked"))

    monkeypatch.setattr(totals, "recalculate_round_score", broken)

    with caplog.at_level(logging.ERROR, logger="golftrack.golf.totals"):
        assert refresh_round_score(db, rnd.id) is None

    assert "failed to update round total score" in caplog.text
    # The hole score written before the failure is still there.
    count = db.execute(
        select(func.count(HoleScore.id)).where(HoleScore.round_id == rnd.id)
    ).scalar_one()
    assert count == 1
