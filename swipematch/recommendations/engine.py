from __future__ import annotations

import logging
import time
from typing import Any

from ..analytics.store import record_event
from ..profiles.models import UserProfile
from ..profiles.repository import update_user
from ..storage.document_store import InMemoryDocumentStore, WriteBatch
from ..storage.paths import (
    recommendation_flag_path,
    recommendation_path,
    recommendations_collection,
)
from ..swipes.store import SwipeStore
from .candidates import CandidateSource
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """Rebuilds a user's recommendation set in one atomic rewrite."""

    def __init__(
        self,
        store: InMemoryDocumentStore,
        config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
        swipe_store: SwipeStore | None = None,
        candidate_source: CandidateSource | None = None,
    ) -> None:
        self.store = store
        self.config = config
        self.swipe_store = swipe_store or SwipeStore(store)
        self.candidate_source = candidate_source or CandidateSource(store, config)

    def recompute(
        self,
        user: UserProfile,
        flip_in_progress: bool = True,
    ) -> list[dict[str, Any]] | None:
        """
        Replace the user's recommendations with a freshly fetched set.

        Returns the written candidates, or ``None`` when the cycle aborted. An
        aborted cycle keeps the previous set, and the in-progress flag stays up
        until a later cycle succeeds.
        """
        start_time = time.time()
        strategy = self.candidate_source.strategy_for(user)

        try:
            batch = self.store.batch()

            # Deletes are staged in the same batch as the new inserts.
            self._wipe_out_old_recommendations(batch, user.id, flip_in_progress)

            swipes = self.swipe_store.all_swipes_for_user(user.id)

            candidates = self.candidate_source.fetch(user, swipes)

            candidates = self._write_new_recommendations(batch, user.id, candidates)

            batch.commit()
        except Exception:
            logger.exception("Recommendation cycle for %s aborted", user.id)
            self._record(user, strategy, start_time, success=False)
            return None

        logger.info("Wrote %d recommendations for %s", len(candidates), user.id)
        self._finish(user, len(candidates))
        self._record(user, strategy, start_time, success=True, size=len(candidates))
        return candidates

    def _wipe_out_old_recommendations(
        self,
        batch: WriteBatch,
        user_id: str,
        flip_in_progress: bool,
    ) -> None:
        existing = self.store.list_documents(recommendations_collection(user_id))

        if flip_in_progress:
            self.store.set(
                recommendation_flag_path(user_id),
                {"isComputingRecommendation": True},
                merge=True,
            )

        for doc in existing:
            batch.delete(doc.path)

    def _write_new_recommendations(
        self,
        batch: WriteBatch,
        user_id: str,
        candidates: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        written: list[dict[str, Any]] = []
        seen: set[str] = set()
        for candidate in candidates:
            candidate_id = candidate.get("id")
            if not candidate_id or candidate_id == user_id or candidate_id in seen:
                continue
            seen.add(candidate_id)
            batch.set(recommendation_path(user_id, candidate_id), candidate)
            written.append(candidate)
        return written

    def _finish(self, user: UserProfile, size: int) -> None:
        """Post-commit bookkeeping. Failures are logged; the new set stays."""
        try:
            self.store.set(
                recommendation_flag_path(user.id),
                {"isComputingRecommendation": False},
                merge=True,
            )
        except Exception:
            logger.error("Failed to clear computing flag for %s", user.id, exc_info=True)

        data_to_update: dict[str, Any] = {
            "hasComputedRecommendations": True,
            "currentRecommendationSize": size,
        }
        if user.settings is None:
            data_to_update["settings"] = self.config.default_settings.model_dump()

        try:
            update_user(self.store, user.id, data_to_update)
        except Exception:
            logger.error("Failed to update recommendation state for %s", user.id, exc_info=True)

    def _record(
        self,
        user: UserProfile,
        strategy: str,
        start_time: float,
        success: bool,
        size: int = 0,
    ) -> None:
        record_event("recompute", {
            "user_id": user.id,
            "strategy": strategy,
            "size": size,
            "success": success,
            "elapsed_ms": round((time.time() - start_time) * 1000, 1),
        })
