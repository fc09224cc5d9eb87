from __future__ import annotations

import numpy as np

EARTH_RADIUS_KM = 6371.0088


def haversine_km(
    lat: float,
    lon: float,
    lats: np.ndarray,
    lons: np.ndarray,
) -> np.ndarray:
    """Great-circle distances in km from one point to many, vectorised."""
    lat1 = np.radians(lat)
    lon1 = np.radians(lon)
    lat2 = np.radians(lats)
    lon2 = np.radians(lons)

    a = (
        np.sin((lat2 - lat1) / 2.0) ** 2
        + np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def geo_point(latitude: float, longitude: float) -> dict[str, float]:
    return {"latitude": float(latitude), "longitude": float(longitude)}


def index_entry(latitude: float, longitude: float) -> dict:
    """Opaque index field stored next to a document's coordinates."""
    return {
        "geopoint": geo_point(latitude, longitude),
        "cell": f"{round(latitude, 1)}:{round(longitude, 1)}",
    }
