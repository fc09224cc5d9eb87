from __future__ import annotations

import math

MILE_TO_KM = 1.609344
MILE_TO_NAUTICAL = 0.8684

SAME_POINT = "< 1 mile away"


def miles_to_km(miles: float) -> float:
    return miles * MILE_TO_KM


def km_to_miles(km: float) -> float:
    return km / MILE_TO_KM


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_distance_string(dist: float) -> str:
    """Human-readable distance; anything that rounds below 2 reads as one mile."""
    distance = _round_half_up(dist)
    if distance >= 2:
        return f"{distance} miles away"
    return "1 mile away"


def distance_between(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    unit: str = "M",
) -> str:
    """
    Distance between two coordinates, formatted for display.

    Uses the spherical law of cosines. ``unit`` is ``"M"`` (statute miles),
    ``"K"`` (kilometers) or ``"N"`` (nautical miles).
    """
    if lat1 == lat2 and lon1 == lon2:
        return SAME_POINT

    radlat1 = math.radians(lat1)
    radlat2 = math.radians(lat2)
    radtheta = math.radians(lon1 - lon2)

    dist = (
        math.sin(radlat1) * math.sin(radlat2)
        + math.cos(radlat1) * math.cos(radlat2) * math.cos(radtheta)
    )
    # Rounding error can push the sum just outside [-1, 1], acos' domain.
    dist = max(-1.0, min(dist, 1.0))

    dist = math.degrees(math.acos(dist))
    dist = dist * 60 * 1.1515

    if unit == "K":
        dist = dist * MILE_TO_KM
    elif unit == "N":
        dist = dist * MILE_TO_NAUTICAL

    return get_distance_string(dist)
