from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from golftrack.api.deps import get_current_player, get_db
from golftrack.api.v1.courses import CourseSummaryOut
from golftrack.api.v1.hole_scores import HoleScoreOut, hole_score_out
from golftrack.api.v1.lookups import get_owned_round
from golftrack.api.v1.pagination import Page, page_of
from golftrack.api.v1.shots import ShotOut
from golftrack.core.errors import (
    COURSE_NOT_FOUND,
    NotFoundError,
    ValidationError,
    round_not_found,
)
from golftrack.core.settings import settings
from golftrack.golf.constants import WindDirection
from golftrack.golf.statistics import RoundStatistics, compute_round_statistics
from golftrack.models.course import Course
from golftrack.models.hole_score import HoleScore
from golftrack.models.player import Player
from golftrack.models.round import Round
from golftrack.models.shot import Shot

router = APIRouter()


class RoundWeatherIn(BaseModel):
    weather: str | None = Field(default=None, max_length=100)
    temperature: int | None = Field(default=None, ge=-50, le=150)
    wind_speed: int | None = Field(default=None, ge=0, le=100)
    wind_direction: WindDirection | None = None


class RoundCreate(RoundWeatherIn):
    course_id: int
    start_time: datetime | None = None


class RoundUpdate(RoundWeatherIn):
    end_time: datetime | None = None


class RoundOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    start_time: datetime
    end_time: datetime | None
    weather: str | None
    temperature: int | None
    wind_speed: int | None
    wind_direction: str | None
    score: int | None
    created_at: datetime
    updated_at: datetime
    course: CourseSummaryOut
    shot_count: int = 0


class RoundDetailOut(RoundOut):
    shots: list[ShotOut]
    hole_scores: list[HoleScoreOut]


def _shot_counts(db: Session, round_ids: list[int]) -> dict[int, int]:
    if not round_ids:
        return {}
    rows = db.execute(
        select(Shot.round_id, func.count(Shot.id))
        .where(Shot.round_id.in_(round_ids))
        .group_by(Shot.round_id)
    ).all()
    return {rid: int(n) for rid, n in rows}


def _round_out(db: Session, rnd: Round) -> RoundOut:
    out = RoundOut.model_validate(rnd)
    out.shot_count = _shot_counts(db, [rnd.id]).get(rnd.id, 0)
    return out


def _load_round(db: Session, round_id: int, player_id: int) -> Round:
    rnd = db.execute(
        select(Round)
        .options(
            joinedload(Round.course).joinedload(Course.holes),
            joinedload(Round.shots).joinedload(Shot.hole),
            joinedload(Round.hole_scores).joinedload(HoleScore.hole),
        )
        .where(Round.id == round_id, Round.player_id == player_id)
    ).scalars().unique().one_or_none()
    if not rnd:
        raise round_not_found()
    return rnd


@router.post("/rounds", response_model=RoundOut, status_code=201)
def create_round(
    payload: RoundCreate,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):

    course = db.execute(
        select(Course).where(Course.id == payload.course_id, Course.archived_at.is_(None))
    ).scalars().one_or_none()
    if not course:
        raise NotFoundError(COURSE_NOT_FOUND, "Course not found")

    rnd = Round(
        player_id=player.id,
        course_id=course.id,
        start_time=payload.start_time or datetime.now(timezone.utc),
        weather=payload.weather,
        temperature=payload.temperature,
        wind_speed=payload.wind_speed,
        wind_direction=payload.wind_direction,
    )
    db.add(rnd)
    db.commit()
    db.refresh(rnd)

    return _round_out(db, rnd)


@router.get("/rounds", response_model=Page[RoundOut])
def list_rounds(
    course_id: int | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    if start_date and end_date and start_date > end_date:
        raise ValidationError("End date must be after start date", field="end_date")

    conditions = [Round.player_id == player.id]
    if course_id is not None:
        conditions.append(Round.course_id == course_id)
    if start_date is not None:
        conditions.append(Round.start_time >= start_date)
    if end_date is not None:
        conditions.append(Round.start_time <= end_date)

    total = db.execute(select(func.count(Round.id)).where(*conditions)).scalar_one()
    rounds = db.execute(
        select(Round)
        .options(joinedload(Round.course))
        .where(*conditions)
        .order_by(Round.start_time.desc(), Round.id.desc())
        .limit(limit)
        .offset(offset)
    ).scalars().all()

    counts = _shot_counts(db, [r.id for r in rounds])
    items = []
    for r in rounds:
        out = RoundOut.model_validate(r)
        out.shot_count = counts.get(r.id, 0)
        items.append(out)

    return page_of(items, total=total, limit=limit, offset=offset)


@router.get("/rounds/{round_id}", response_model=RoundDetailOut)
def get_round(
    round_id: int,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    rnd = _load_round(db, round_id, player.id)

    shots = sorted(rnd.shots, key=lambda s: (s.hole.number, s.shot_number))
    hole_scores = sorted(rnd.hole_scores, key=lambda hs: hs.hole.number)

    out = RoundOut.model_validate(rnd)
    return RoundDetailOut(
        **out.model_dump(exclude={"shot_count"}),
        shot_count=len(shots),
        shots=[ShotOut.model_validate(s) for s in shots],
        hole_scores=[hole_score_out(hs) for hs in hole_scores],
    )


@router.patch("/rounds/{round_id}", response_model=RoundOut)
def update_round(
    round_id: int,
    payload: RoundUpdate,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    rnd = get_owned_round(db, round_id, player.id)

    # `score` is derived from hole scores and is not writable through this route.
    for field, value in payload.model_dump(exclude_none=True).items():
        setattr(rnd, field, value)

    db.commit()
    db.refresh(rnd)
    return _round_out(db, rnd)


@router.delete("/rounds/{round_id}")
def delete_round(
    round_id: int,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    rnd = get_owned_round(db, round_id, player.id)

    # Shots and hole scores are removed with the round.
    db.delete(rnd)
    db.commit()
    return {"ok": True}


@router.get("/rounds/{round_id}/statistics", response_model=RoundStatistics)
def get_round_statistics(
    round_id: int,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    rnd = _load_round(db, round_id, player.id)

    return compute_round_statistics(
        rnd.shots,
        score=rnd.score,
        course_par=rnd.course.total_par,
    )
