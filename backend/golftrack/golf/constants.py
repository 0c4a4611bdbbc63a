from typing import Literal, get_args

Club = Literal[
    # Drivers & woods
    "driver",
    "3-wood",
    "5-wood",
    "7-wood",
    # Hybrids
    "1-hybrid",
    "2-hybrid",
    "3-hybrid",
    "4-hybrid",
    "5-hybrid",
    # Irons
    "1-iron",
    "2-iron",
    "3-iron",
    "4-iron",
    "5-iron",
    "6-iron",
    "7-iron",
    "8-iron",
    "9-iron",
    # Wedges
    "pitching-wedge",
    "gap-wedge",
    "sand-wedge",
    "lob-wedge",
    "putter",
    "other",
]

ShotResult = Literal[
    "fairway",
    "rough",
    "bunker",
    "water",
    "trees",
    "green",
    "hole",
    "out-of-bounds",
]

WindDirection = Literal["N", "NE", "E", "SE", "S", "SW", "W", "NW"]

CLUBS: tuple[str, ...] = get_args(Club)
SHOT_RESULTS: tuple[str, ...] = get_args(ShotResult)
WIND_DIRECTIONS: tuple[str, ...] = get_args(WindDirection)

# Results that count towards a club's accuracy percentage.
SUCCESSFUL_RESULTS = frozenset({"fairway", "green", "hole"})
