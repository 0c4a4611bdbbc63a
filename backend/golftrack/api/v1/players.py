from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from golftrack.api.deps import get_current_player, get_db
from golftrack.models.player import Player

router = APIRouter()


class PlayerMeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str
    name: str | None
    display_name: str
    handicap: float | None


class PlayerMeUpdateIn(BaseModel):
    name: str | None = Field(default=None, max_length=128)
    handicap: float | None = Field(default=None, ge=-10, le=54)


@router.get("/players/me", response_model=PlayerMeOut)
def upsert_me(
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):
    db.commit()
    db.refresh(player)
    return player


@router.patch("/players/me", response_model=PlayerMeOut)
def update_me(
    payload: PlayerMeUpdateIn,
    db: Session = Depends(get_db),
    player: Player = Depends(get_current_player),
):

    if payload.name is not None:
        v = payload.name.strip()
        player.name = v or None

    if payload.handicap is not None:
        player.handicap = payload.handicap

    db.commit()
    db.refresh(player)
    return player
