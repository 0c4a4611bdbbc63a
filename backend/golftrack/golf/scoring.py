"""Pure golf scoring rules: score labels, Stableford, handicaps."""

from collections.abc import Sequence

from golftrack.core.errors import INSUFFICIENT_SCORES, ValidationError
from golftrack.golf.rounding import round_half_up, round_half_up_to

SCORE_LABELS = {
    -3: "Albatross",
    -2: "Eagle",
    -1: "Birdie",
    0: "Par",
    1: "Bogey",
    2: "Double Bogey",
    3: "Triple Bogey",
}

MIN_DIFFERENTIALS = 5
HANDICAP_FACTOR = 0.96
STANDARD_SLOPE = 113

# (minimum number of differentials, how many of the lowest to average)
BEST_OF_TABLE = (
    (20, 8),
    (15, 6),
    (10, 4),
    (7, 2),
)


def score_label(strokes: int, par: int) -> str:
    diff = strokes - par
    label = SCORE_LABELS.get(diff)
    if label is not None:
        return label
    return f"+{diff}" if diff > 0 else str(diff)


def stableford_points(strokes: int, par: int, strokes_received: int = 0) -> int:
    diff = (strokes - strokes_received) - par
    if diff <= -2:
        return 5
    if diff >= 3:
        return 0
    return 3 - diff


def _differentials_to_use(count: int) -> int:
    for minimum, best in BEST_OF_TABLE:
        if count >= minimum:
            return best
    return 1


def handicap_index(differentials: Sequence[float]) -> float:
    """Simplified handicap index from recent score differentials.

    Averages the lowest N differentials (N depends on how many are supplied),
    applies the 0.96 bonus-for-excellence factor and rounds to one decimal.
    At least five differentials are required.
    """
    if len(differentials) < MIN_DIFFERENTIALS:
        raise ValidationError(
            f"Need at least {MIN_DIFFERENTIALS} scores to calculate handicap",
            field="differentials",
            code=INSUFFICIENT_SCORES,
        )

    best = sorted(differentials)[: _differentials_to_use(len(differentials))]
    average = sum(best) / len(best)
    return round_half_up_to(average * HANDICAP_FACTOR, 1)


def course_handicap(
    handicap_index: float,
    slope_rating: float = STANDARD_SLOPE,
    *,
    course_rating: float,
    par: int,
) -> int:
    return round_half_up(handicap_index * slope_rating / STANDARD_SLOPE + (course_rating - par))


def is_valid_score(score: int, par: int) -> bool:
    # Anything above triple the par is treated as a data entry error.
    return 0 < score <= par * 3
