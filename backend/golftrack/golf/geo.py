"""Great-circle helpers for shot and hole coordinates."""

import math

EARTH_RADIUS_M = 6_371_008.8
METERS_PER_YARD = 0.9144


def _radians(point: tuple[float, float]) -> tuple[float, float]:
    lat, lng = point
    return math.radians(lat), math.radians(lng)


def distance_meters(start: tuple[float, float], end: tuple[float, float]) -> float:
    """Haversine distance between two (lat, lng) points."""
    lat1, lng1 = _radians(start)
    lat2, lng2 = _radians(end)
    dlat = lat2 - lat1
    dlng = lng2 - lng1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


def distance_yards(start: tuple[float, float], end: tuple[float, float]) -> float:
    return distance_meters(start, end) / METERS_PER_YARD


def initial_bearing(start: tuple[float, float], end: tuple[float, float]) -> float:
    """Compass bearing in degrees [0, 360) from ``start`` towards ``end``."""
    lat1, lng1 = _radians(start)
    lat2, lng2 = _radians(end)
    dlng = lng2 - lng1

    x = math.sin(dlng) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlng)
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0
