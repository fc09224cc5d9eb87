from __future__ import annotations

import logging
from typing import Any

from ..profiles.repository import fetch_user, parse_user
from ..storage.document_store import ChangeEvent, InMemoryDocumentStore
from ..storage.paths import (
    RECOMMENDATION_PATTERN,
    USER_PATTERN,
    recommendations_collection,
    user_path,
)
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .engine import RecommendationEngine
from .policy import ProfileWriteAction, decide_on_profile_write, should_replenish

logger = logging.getLogger(__name__)


class RecommendationTriggers:
    """Reacts to store changes that can make a recommendation set stale or short."""

    def __init__(
        self,
        store: InMemoryDocumentStore,
        engine: RecommendationEngine | None = None,
        config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
    ) -> None:
        self.store = store
        self.config = config
        self.engine = engine or RecommendationEngine(store, config)

    def on_user_data_write(self, event: ChangeEvent) -> Any:
        prev_user = parse_user(event.before)
        new_user = parse_user(event.after)

        action = decide_on_profile_write(prev_user, new_user, self.config)
        logger.debug("Profile write for %s -> %s", event.params.get("userID"), action.value)

        if action is ProfileWriteAction.recompute:
            return self.engine.recompute(new_user, flip_in_progress=True)

        if action is ProfileWriteAction.update_geo_index:
            self.store.set_geo_point(
                user_path(new_user.id),
                new_user.location.latitude,
                new_user.location.longitude,
            )
        elif action is ProfileWriteAction.backfill_settings:
            self.store.update(
                user_path(new_user.id),
                {"settings": self.config.default_settings.model_dump()},
            )
        return None

    def on_user_recommendation_delete(self, event: ChangeEvent) -> Any:
        # Rewrites delete the whole set; only consumption of a card counts.
        if event.in_batch:
            return None

        user_id = event.params.get("userID")
        if not isinstance(user_id, str):
            return None

        try:
            user = fetch_user(self.store, user_id)
            if user is None:
                return None

            remaining = self.store.count(recommendations_collection(user_id))
            if should_replenish(remaining, self.config):
                logger.info("%d recommendations left for %s, replenishing", remaining, user_id)
                return self.engine.recompute(user, flip_in_progress=False)
        except Exception:
            logger.exception("Replenishing recommendations for %s failed", user_id)
        return None


def register_triggers(
    store: InMemoryDocumentStore,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> RecommendationTriggers:
    """Subscribe the recommendation triggers to ``store`` change notifications."""
    triggers = RecommendationTriggers(store, config=config)
    store.on_write(USER_PATTERN, triggers.on_user_data_write)
    store.on_delete(RECOMMENDATION_PATTERN, triggers.on_user_recommendation_delete)
    return triggers
