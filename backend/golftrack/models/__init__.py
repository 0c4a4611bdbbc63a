from .course import Course, Hole
from .hole_score import HoleScore
from .player import Player
from .round import Round
from .shot import Shot

__all__ = [
    "Player",
    "Course",
    "Hole",
    "Round",
    "HoleScore",
    "Shot",
]
