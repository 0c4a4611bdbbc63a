from sqlalchemy import select
from sqlalchemy.orm import Session

from golftrack.core.errors import hole_not_found, round_not_found
from golftrack.models.course import Hole
from golftrack.models.round import Round


def get_owned_round(db: Session, round_id: int, player_id: int) -> Round:
    rnd = db.execute(
        select(Round).where(Round.id == round_id, Round.player_id == player_id)
    ).scalars().one_or_none()
    if not rnd:
        raise round_not_found()
    return rnd


def get_round_hole(db: Session, rnd: Round, hole_id: int) -> Hole:
    # A hole from another course is reported as missing.
    hole = db.execute(
        select(Hole).where(Hole.id == hole_id, Hole.course_id == rnd.course_id)
    ).scalars().one_or_none()
    if not hole:
        raise hole_not_found()
    return hole
