from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from golftrack.api.deps import get_current_player, get_db
from golftrack.api.errors import validation_error_from
from golftrack.api.v1.hole_scores import HoleSummaryOut
from golftrack.api.v1.lookups import get_owned_round, get_round_hole
from golftrack.api.v1.pagination import Page, page_of
from golftrack.core.errors import (
    DUPLICATE_SHOT_NUMBER,
    HOLE_NOT_FOUND,
    ConflictError,
    NotFoundError,
    duplicate_shot,
    shot_not_found,
)
from golftrack.core.settings import settings
from golftrack.golf.constants import Club, ShotResult
from golftrack.golf.statistics import ShotStatistics, compute_shot_statistics
from golftrack.models.course import Hole
from golftrack.models.player import Player
from golftrack.models.round import Round
from golftrack.models.shot import Shot

router = APIRouter()

MAX_BATCH_SHOTS = 50


class Location(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class ShotCreate(BaseModel):
    hole_id: int
    shot_number: int = Field(ge=1, le=20)
    club: Club
    distance: float | None = Field(default=None, ge=0, le=500)
    start_location: Location
    end_location: Location | None = None
    result: ShotResult | None = None
    notes: str | None = Field(default=None, max_length=500)


class ShotBatchCreate(BaseModel):
    shots: list[ShotCreate] = Field(min_length=1, max_length=MAX_BATCH_SHOTS)

    @field_validator("shots")
    @classmethod
    def validate_unique_shot_numbers(cls, shots: list[ShotCreate]) -> list[ShotCreate]:
        keys = [(s.hole_id, s.shot_number) for s in shots]
        if len(set(keys)) != len(keys):
            raise ValueError("Duplicate shot numbers found for the same hole")
        return shots


class ShotUpdate(BaseModel):
    club: Club | None = None
    distance: float | None = Field(default=None, ge=0, le=500)
    start_location: Location | None = None
    end_location: Location | None = None
    result: ShotResult | None = None
    notes: str | None = Field(default=None, max_length=500)


class ShotOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    round_id: int
    hole_id: int
    shot_number: int
    club: str
    distance: float | None
    start_location: Location
    end_location: Location | None
    measured_distance: float | None
    result: str | None
    notes: str | None
    created_at: datetime
    hole: HoleSummaryOut


class ShotBatchOut(BaseModel):
    count: int


def validate_shot(payload: dict) -> ShotCreate:
    """Check a raw shot payload without touching the database."""
    try:
        return ShotCreate.model_validate(payload)
    except PydanticValidationError as exc:
        raise validation_error_from(exc.errors()) from exc


def _shot_from(payload: ShotCreate, round_id: int, player_id: int) -> Shot:
    return Shot(
        round_id=round_id,
        hole_id=payload.hole_id,
        player_id=player_id,
        shot_number=payload.shot_number,
        club=payload.club,
        distance=payload.distance,
        start_lat=payload.start_location.lat,
        start_lng=payload.start_location.lng,
        end_lat=payload.end_location.lat if payload.end_location else None,
        end_lng=payload.end_location.lng if payload.end_location else None,
        result=payload.result,
        notes=payload.notes,
    )


def _shot_number_taken(db: Session, round_id: int, hole_id: int, shot_number: int) -> bool:
    return db.execute(
        select(Shot.id).where(
            Shot.round_id == round_id,
            Shot.hole_id == hole_id,
            Shot.shot_number == shot_number,
        )
    ).first() is not None


def _get_shot(db: Session, shot_id: int, player_id: int) -> Shot:
    shot = db.execute(
        select(Shot)
        .options(joinedload(Shot.hole))
        .where(Shot.id == shot_id, Shot.player_id == player_id)
    ).scalars().one_or_none()
    if not shot:
        raise shot_not_found()
    return shot


@router.post("/rounds/{round_id}/shots", response_model=ShotOut, status_code=201)
def create_shot(
    round_id: int,
    payload: ShotCreate,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    rnd = get_owned_round(db, round_id, player.id)
    get_round_hole(db, rnd, payload.hole_id)

    if _shot_number_taken(db, round_id, payload.hole_id, payload.shot_number):
        raise duplicate_shot(payload.shot_number)

    shot = _shot_from(payload, round_id, player.id)
    db.add(shot)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same shot number after our check.
        db.rollback()
        raise duplicate_shot(payload.shot_number)

    return _get_shot(db, shot.id, player.id)


@router.post("/rounds/{round_id}/shots/batch", response_model=ShotBatchOut, status_code=201)
def create_shots_batch(
    round_id: int,
    payload: ShotBatchCreate,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    rnd = get_owned_round(db, round_id, player.id)

    hole_ids = {s.hole_id for s in payload.shots}
    found = db.execute(
        select(func.count(Hole.id)).where(
            Hole.id.in_(sorted(hole_ids)), Hole.course_id == rnd.course_id
        )
    ).scalar_one()
    if found != len(hole_ids):
        raise NotFoundError(HOLE_NOT_FOUND, "One or more holes not found")

    db.add_all([_shot_from(s, round_id, player.id) for s in payload.shots])
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            DUPLICATE_SHOT_NUMBER,
            "One or more shot numbers already exist for these holes",
            field="shots",
        )

    return ShotBatchOut(count=len(payload.shots))


@router.get("/shots", response_model=Page[ShotOut])
def list_shots(
    round_id: int | None = None,
    hole_id: int | None = None,
    club: Club | None = None,
    result: ShotResult | None = None,
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):

    conditions = [Shot.player_id == player.id]
    if round_id is not None:
        conditions.append(Shot.round_id == round_id)
    if hole_id is not None:
        conditions.append(Shot.hole_id == hole_id)
    if club is not None:
        conditions.append(Shot.club == club)
    if result is not None:
        conditions.append(Shot.result == result)

    total = db.execute(select(func.count(Shot.id)).where(*conditions)).scalar_one()
    shots = db.execute(
        select(Shot)
        .join(Round, Round.id == Shot.round_id)
        .join(Hole, Hole.id == Shot.hole_id)
        .options(joinedload(Shot.hole))
        .where(*conditions)
        .order_by(Round.start_time.desc(), Hole.number, Shot.shot_number)
        .limit(limit)
        .offset(offset)
    ).scalars().all()

    return page_of(shots, total=total, limit=limit, offset=offset)


@router.get("/shots/statistics", response_model=ShotStatistics)
def get_shot_statistics(
    round_id: int | None = None,
    hole_id: int | None = None,
    club: Club | None = None,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):

    conditions = [Shot.player_id == player.id]
    if round_id is not None:
        conditions.append(Shot.round_id == round_id)
    if hole_id is not None:
        conditions.append(Shot.hole_id == hole_id)
    if club is not None:
        conditions.append(Shot.club == club)

    shots = db.execute(
        select(Shot).options(joinedload(Shot.hole)).where(*conditions)
    ).scalars().all()
    return compute_shot_statistics(shots)


@router.get("/shots/{shot_id}", response_model=ShotOut)
def get_shot(
    shot_id: int,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    return _get_shot(db, shot_id, player.id)


@router.patch("/shots/{shot_id}", response_model=ShotOut)
def update_shot(
    shot_id: int,
    payload: ShotUpdate,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    shot = _get_shot(db, shot_id, player.id)

    if payload.club is not None:
        shot.club = payload.club
    if payload.distance is not None:
        shot.distance = payload.distance
    if payload.start_location is not None:
        shot.start_lat = payload.start_location.lat
        shot.start_lng = payload.start_location.lng
    if payload.end_location is not None:
        shot.end_lat = payload.end_location.lat
        shot.end_lng = payload.end_location.lng
    if payload.result is not None:
        shot.result = payload.result
    if payload.notes is not None:
        shot.notes = payload.notes

    db.commit()
    return _get_shot(db, shot_id, player.id)


@router.delete("/shots/{shot_id}")
def delete_shot(
    shot_id: int,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    shot = _get_shot(db, shot_id, player.id)

    db.delete(shot)
    db.commit()
    return {"ok": True}
