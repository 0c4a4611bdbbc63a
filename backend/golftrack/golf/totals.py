import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from golftrack.models.hole_score import HoleScore
from golftrack.models.round import Round

logger = logging.getLogger(__name__)


def recalculate_round_score(db: Session, round_id: int) -> int | None:
    """Write the sum of the round's hole scores to ``Round.score`` and commit.

    A round without hole scores gets ``None`` rather than 0. Running it again
    over the same hole scores always produces the same total.
    """
    count, total = db.execute(
        select(func.count(HoleScore.id), func.sum(HoleScore.score)).where(
            HoleScore.round_id == round_id
        )
    ).one()
    score = int(total) if count else None

    rnd = db.get(Round, round_id)
    if rnd is None:
        return None
    rnd.score = score
    db.commit()
    return score


def refresh_round_score(db: Session, round_id: int) -> int | None:
    """Best-effort wrapper used after a hole score write has committed.

    The hole score write stays committed even when this fails; the error is
    logged and the next hole score write recomputes the total.
    """
    try:
        return recalculate_round_score(db, round_id)
    except Exception:
        db.rollback()
        logger.exception("failed to update round total score", extra={"round_id": round_id})
        return None
