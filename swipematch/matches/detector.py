from __future__ import annotations

import logging
import time
from typing import Any

from ..analytics.store import record_event
from ..notifications.config import DEFAULT_NOTIFICATION_CONFIG, NotificationConfig
from ..notifications.push import send_push_notification
from ..storage.document_store import InMemoryDocumentStore
from ..storage.paths import matches_collection
from ..swipes.models import Swipe
from ..swipes.store import SwipeStore

logger = logging.getLogger(__name__)


class MatchDetector:
    """Detects mutual likes and records the resulting pair of matches."""

    def __init__(
        self,
        store: InMemoryDocumentStore,
        swipe_store: SwipeStore | None = None,
        config: NotificationConfig = DEFAULT_NOTIFICATION_CONFIG,
    ) -> None:
        self.store = store
        self.swipe_store = swipe_store or SwipeStore(store)
        self.config = config

    def check_match(self, swipe: Swipe) -> bool:
        if not swipe.type.is_positive:
            return False
        return self.swipe_store.has_reciprocal_swipe(
            swipe.swiped_profile_id,
            swipe.author_id,
            swipe.type,
        )

    def _add_match(self, owner_id: str, other: dict[str, Any], has_been_seen: bool) -> bool:
        try:
            self.store.set(
                f"{matches_collection(owner_id)}/{other['id']}",
                {
                    "id": other["id"],
                    "match": other,
                    "hasBeenSeen": has_been_seen,
                    "createdAt": time.time(),
                },
            )
            return True
        except Exception:
            logger.error(
                "Failed to record match %s -> %s", owner_id, other.get("id"), exc_info=True,
            )
            return False

    def did_detect_new_match(
        self,
        author: dict[str, Any] | None,
        matched_user: dict[str, Any] | None,
    ) -> None:
        """
        Record a new match between the swiping author and the matched user.

        The author has just seen the match, so only the matched user's entry
        starts unseen and only the matched user is notified.
        """
        if not author or not matched_user:
            return

        author_saved = self._add_match(author["id"], matched_user, has_been_seen=True)
        matched_saved = self._add_match(matched_user["id"], author, has_been_seen=False)
        if author_saved != matched_saved:
            logger.warning(
                "Match between %s and %s only partially recorded",
                author["id"], matched_user["id"],
            )

        record_event("match", {
            "author_id": author["id"],
            "matched_user_id": matched_user["id"],
            "complete": author_saved and matched_saved,
        })

        try:
            send_push_notification(
                self.store,
                matched_user["id"],
                self.config.match_title,
                self.config.match_body,
                self.config.match_category,
                {"fromUser": author},
                config=self.config,
            )
        except Exception:
            logger.warning("Match notification to %s failed", matched_user["id"], exc_info=True)
