"""Shot and round statistics.

Both aggregators are pure: they reduce whatever shots they are handed and
never touch the database. Shots only need ``shot_number``, ``club``,
``distance``, ``result`` and ``hole`` (with ``par`` and ``number``) attributes,
so ORM rows and plain namespaces both work.
"""

from collections import defaultdict
from collections.abc import Iterable

from pydantic import BaseModel

from golftrack.golf.constants import SUCCESSFUL_RESULTS
from golftrack.golf.rounding import round_half_up, round_half_up_to


class ShotAccuracy(BaseModel):
    fairways_hit: int
    greens_in_regulation: int
    total: int


class ClubStats(BaseModel):
    count: int
    average_distance: int
    accuracy: int


class ShotStatistics(BaseModel):
    total_shots: int
    average_distance: int
    accuracy: ShotAccuracy
    club_stats: dict[str, ClubStats]
    result_breakdown: dict[str, int]


class RoundAccuracy(BaseModel):
    fairways_hit: int
    greens_in_regulation: int
    total_fairways: int
    total_greens: int


class RoundStatistics(BaseModel):
    total_shots: int
    total_score: int | None
    par_difference: int | None
    average_shots: float
    holes_played: int
    accuracy: RoundAccuracy


def regulation_shots(par: int | None) -> int:
    """Shots allowed to reach the green in regulation (par - 2).

    Unknown par gives 0, and a threshold of 0 or less means no shot qualifies.
    """
    if par is None:
        return 0
    return par - 2


def _average_distance(shots) -> int:
    distances = [s.distance for s in shots if s.distance is not None]
    if not distances:
        return 0
    return round_half_up(sum(distances) / len(distances))


def _is_fairway_hit(shot) -> bool:
    return shot.shot_number == 1 and shot.result == "fairway"


def _is_green_in_regulation(shot) -> bool:
    hole = getattr(shot, "hole", None)
    threshold = regulation_shots(hole.par if hole is not None else None)
    if threshold <= 0:
        return False
    return shot.shot_number <= threshold and shot.result == "green"


def compute_shot_statistics(shots: Iterable) -> ShotStatistics:
    shots = list(shots)

    by_club: dict[str, list] = defaultdict(list)
    result_breakdown: dict[str, int] = {}
    for shot in shots:
        by_club[shot.club].append(shot)
        if shot.result:
            result_breakdown[shot.result] = result_breakdown.get(shot.result, 0) + 1

    club_stats = {}
    for club, club_shots in by_club.items():
        successful = sum(1 for s in club_shots if s.result in SUCCESSFUL_RESULTS)
        club_stats[club] = ClubStats(
            count=len(club_shots),
            average_distance=_average_distance(club_shots),
            accuracy=round_half_up(successful / len(club_shots) * 100),
        )

    return ShotStatistics(
        total_shots=len(shots),
        average_distance=_average_distance(shots),
        accuracy=ShotAccuracy(
            fairways_hit=sum(1 for s in shots if _is_fairway_hit(s)),
            greens_in_regulation=sum(1 for s in shots if _is_green_in_regulation(s)),
            total=len(shots),
        ),
        club_stats=club_stats,
        result_breakdown=result_breakdown,
    )


def compute_round_statistics(
    shots: Iterable,
    *,
    score: int | None,
    course_par: int,
) -> RoundStatistics:
    shots = list(shots)

    by_hole: dict[int, list] = defaultdict(list)
    for shot in shots:
        by_hole[shot.hole.number].append(shot)

    greens_in_regulation = 0
    for hole_shots in by_hole.values():
        ordered = sorted(hole_shots, key=lambda s: s.shot_number)
        threshold = regulation_shots(ordered[0].hole.par)
        shots_to_green = next(
            (i for i, s in enumerate(ordered, start=1) if s.result == "green"), None
        )
        if shots_to_green is not None and shots_to_green <= threshold:
            greens_in_regulation += 1

    holes_played = len(by_hole)
    tee_shots = [s for s in shots if s.shot_number == 1]

    return RoundStatistics(
        total_shots=len(shots),
        total_score=score,
        par_difference=score - course_par if score is not None else None,
        average_shots=round_half_up_to(len(shots) / holes_played, 2) if holes_played else 0,
        holes_played=holes_played,
        accuracy=RoundAccuracy(
            fairways_hit=sum(1 for s in tee_shots if s.result == "fairway"),
            greens_in_regulation=greens_in_regulation,
            total_fairways=len(tee_shots),
            total_greens=holes_played,
        ),
    )
