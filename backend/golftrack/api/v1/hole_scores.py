from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from golftrack.api.deps import get_current_player, get_db
from golftrack.api.v1.lookups import get_owned_round, get_round_hole
from golftrack.core.errors import HOLE_SCORE_NOT_FOUND, NotFoundError
from golftrack.golf.scoring import score_label, stableford_points
from golftrack.golf.totals import refresh_round_score
from golftrack.models.course import Hole
from golftrack.models.hole_score import HoleScore
from golftrack.models.player import Player

router = APIRouter()


class HoleScoreUpsert(BaseModel):
    hole_id: int
    score: int = Field(ge=1, le=15)
    putts: int | None = Field(default=None, ge=0, le=10)
    fairway: bool | None = None
    gir: bool | None = None
    notes: str | None = Field(default=None, max_length=500)


class HoleScoreUpdate(BaseModel):
    score: int | None = Field(default=None, ge=1, le=15)
    putts: int | None = Field(default=None, ge=0, le=10)
    fairway: bool | None = None
    gir: bool | None = None
    notes: str | None = Field(default=None, max_length=500)


class HoleSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    number: int
    par: int
    yardage: int | None


class HoleScoreOut(BaseModel):
    id: int
    round_id: int
    hole_id: int
    score: int
    putts: int | None
    fairway: bool | None
    gir: bool | None
    notes: str | None
    label: str
    stableford_points: int
    created_at: datetime
    updated_at: datetime
    hole: HoleSummaryOut


def hole_score_out(hs: HoleScore) -> HoleScoreOut:
    return HoleScoreOut(
        id=hs.id,
        round_id=hs.round_id,
        hole_id=hs.hole_id,
        score=hs.score,
        putts=hs.putts,
        fairway=hs.fairway,
        gir=hs.gir,
        notes=hs.notes,
        label=score_label(hs.score, hs.hole.par),
        stableford_points=stableford_points(hs.score, hs.hole.par),
        created_at=hs.created_at,
        updated_at=hs.updated_at,
        hole=HoleSummaryOut.model_validate(hs.hole),
    )


def _get_hole_score(db: Session, hole_score_id: int, player_id: int) -> HoleScore:
    hs = db.execute(
        select(HoleScore)
        .options(joinedload(HoleScore.hole))
        .where(HoleScore.id == hole_score_id, HoleScore.player_id == player_id)
    ).scalars().one_or_none()
    if not hs:
        raise NotFoundError(HOLE_SCORE_NOT_FOUND, "Hole score not found or access denied")
    return hs


def _apply_optional_fields(hs: HoleScore, payload: HoleScoreUpsert | HoleScoreUpdate) -> None:
    # Omitted fields keep their stored value.
    if payload.putts is not None:
        hs.putts = payload.putts
    if payload.fairway is not None:
        hs.fairway = payload.fairway
    if payload.gir is not None:
        hs.gir = payload.gir
    if payload.notes is not None:
        hs.notes = payload.notes


def _find_hole_score(db: Session, round_id: int, hole_id: int) -> HoleScore | None:
    return db.execute(
        select(HoleScore).where(HoleScore.round_id == round_id, HoleScore.hole_id == hole_id)
    ).scalars().one_or_none()


def _write_hole_score(
    db: Session, round_id: int, player_id: int, payload: HoleScoreUpsert
) -> int:
    hs = _find_hole_score(db, round_id, payload.hole_id)
    if hs:
        hs.score = payload.score
        _apply_optional_fields(hs, payload)
    else:
        hs = HoleScore(
            round_id=round_id,
            hole_id=payload.hole_id,
            player_id=player_id,
            score=payload.score,
            putts=payload.putts,
            fairway=payload.fairway,
            gir=payload.gir,
            notes=payload.notes,
        )
        db.add(hs)

    db.commit()
    return hs.id


@router.put("/rounds/{round_id}/hole-scores", response_model=HoleScoreOut)
def upsert_hole_score(
    round_id: int,
    payload: HoleScoreUpsert,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    rnd = get_owned_round(db, round_id, player.id)
    get_round_hole(db, rnd, payload.hole_id)

    try:
        hole_score_id = _write_hole_score(db, round_id, player.id, payload)
    except IntegrityError:
        # Another request inserted this (round, hole) after our lookup; apply ours as an update.
        db.rollback()
        hole_score_id = _write_hole_score(db, round_id, player.id, payload)

    refresh_round_score(db, round_id)

    return hole_score_out(_get_hole_score(db, hole_score_id, player.id))


@router.get("/rounds/{round_id}/hole-scores", response_model=list[HoleScoreOut])
def list_hole_scores(
    round_id: int,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    get_owned_round(db, round_id, player.id)

    scores = db.execute(
        select(HoleScore)
        .join(Hole, Hole.id == HoleScore.hole_id)
        .options(joinedload(HoleScore.hole))
        .where(HoleScore.round_id == round_id, HoleScore.player_id == player.id)
        .order_by(Hole.number)
    ).scalars().all()
    return [hole_score_out(hs) for hs in scores]


@router.patch("/hole-scores/{hole_score_id}", response_model=HoleScoreOut)
def update_hole_score(
    hole_score_id: int,
    payload: HoleScoreUpdate,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    hs = _get_hole_score(db, hole_score_id, player.id)
    round_id = hs.round_id

    if payload.score is not None:
        hs.score = payload.score
    _apply_optional_fields(hs, payload)
    db.commit()

    refresh_round_score(db, round_id)

    return hole_score_out(_get_hole_score(db, hole_score_id, player.id))


@router.delete("/hole-scores/{hole_score_id}")
def delete_hole_score(
    hole_score_id: int,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    hs = _get_hole_score(db, hole_score_id, player.id)
    round_id = hs.round_id

    db.delete(hs)
    db.commit()

    refresh_round_score(db, round_id)

    return {"ok": True}
