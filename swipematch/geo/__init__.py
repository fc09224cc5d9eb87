"""
Distance helpers used when annotating recommendation candidates.
"""
from __future__ import annotations

from .distance import (
    MILE_TO_KM,
    distance_between,
    get_distance_string,
    km_to_miles,
    miles_to_km,
)

__all__ = [
    "MILE_TO_KM",
    "distance_between",
    "get_distance_string",
    "km_to_miles",
    "miles_to_km",
]
