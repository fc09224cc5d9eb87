from __future__ import annotations

import logging
from typing import Any

from ..geo.distance import distance_between, get_distance_string
from ..profiles.models import UserProfile
from ..storage.document_store import Document, Filter, InMemoryDocumentStore
from ..storage.paths import USERS
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .policy import UNLIMITED, get_distance_radius

logger = logging.getLogger(__name__)


class CandidateSource:
    """
    Pulls prospective profiles for a user.

    A finite distance radius becomes one proximity query; an unlimited radius
    pages through all visible users, most recently created first, until the
    batch ceiling is reached or the stream runs out.
    """

    def __init__(
        self,
        store: InMemoryDocumentStore,
        config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
    ) -> None:
        self.store = store
        self.config = config

    def strategy_for(self, user: UserProfile) -> str:
        return "unbounded" if get_distance_radius(user) == UNLIMITED else "geo"

    def fetch(self, user: UserProfile, swipes: dict[str, str]) -> list[dict[str, Any]]:
        distance_radius = get_distance_radius(user)
        if distance_radius == UNLIMITED:
            return self.fetch_unlimited(user, swipes)
        return self.fetch_geo_proximity(user, swipes, float(distance_radius))

    def _filters(self, user: UserProfile) -> list[Filter]:
        filters: list[Filter] = [("settings.show_me", "==", True)]
        gender_preference = user.effective_settings.gender_preference or "all"
        if gender_preference != "all":
            filters.append(("settings.gender", "==", gender_preference))
        return filters

    @staticmethod
    def _excluded(doc: Document, user: UserProfile, swipes: dict[str, str]) -> bool:
        return doc.id == user.id or doc.id in swipes

    def fetch_geo_proximity(
        self,
        user: UserProfile,
        swipes: dict[str, str],
        distance_radius: float,
    ) -> list[dict[str, Any]]:
        radius_km = distance_radius * self.config.mile_to_km
        results = self.store.near(
            USERS,
            center=(user.location.latitude, user.location.longitude),
            radius_km=radius_km,
            filters=self._filters(user),
        )

        candidates = []
        for doc, distance_km in results:
            if self._excluded(doc, user, swipes):
                continue
            candidates.append({
                **doc.data,
                "distance": get_distance_string(distance_km / self.config.mile_to_km),
            })
        return candidates

    def fetch_unlimited(self, user: UserProfile, swipes: dict[str, str]) -> list[dict[str, Any]]:
        ceiling = self.config.batch_fetch_limit
        my_location = user.location
        filters = self._filters(user)

        candidates: list[dict[str, Any]] = []
        most_recent_doc: Document | None = None
        pages = 0

        while len(candidates) < ceiling:
            docs = self.store.query(
                USERS,
                filters=filters,
                order_by="createdAt",
                descending=True,
                limit=self.config.page_size,
                start_after=most_recent_doc,
            )
            pages += 1
            if not docs:
                break
            most_recent_doc = docs[-1]

            for doc in docs:
                if self._excluded(doc, user, swipes):
                    continue
                location = doc.data.get("location") or {}
                if location.get("latitude") is None or location.get("longitude") is None:
                    continue
                candidates.append({
                    **doc.data,
                    "distance": distance_between(
                        location["latitude"],
                        location["longitude"],
                        my_location.latitude,
                        my_location.longitude,
                    ),
                })

        logger.debug("Unbounded fetch for %s read %d pages", user.id, pages)
        return candidates[:ceiling]
