from __future__ import annotations

import logging
from typing import Any

from ..analytics.store import record_event
from ..notifications.dispatcher import dispatch
from ..profiles.repository import fetch_user_data
from ..storage.document_store import InMemoryDocumentStore, get_store
from ..storage.paths import matches_collection, recommendation_path
from ..swipes.models import Swipe, SwipeType
from ..swipes.store import SwipeStore
from .detector import MatchDetector
from .models import MatchListResponse, MatchRecord

logger = logging.getLogger(__name__)


def _remove_recommendation_doc(
    store: InMemoryDocumentStore,
    swiped_profile_id: str,
    author_id: str,
) -> None:
    """Drop the swiped card from the author's recommendation set."""
    try:
        store.delete(recommendation_path(author_id, swiped_profile_id))
    except Exception:
        logger.warning(
            "Could not remove recommendation %s for %s", swiped_profile_id, author_id,
            exc_info=True,
        )


def submit_swipe(
    author_id: str,
    swiped_profile_id: str,
    swipe_type: SwipeType | str,
    store: InMemoryDocumentStore | None = None,
) -> dict[str, Any] | None:
    """
    Record a swipe and report a new match.

    Returns the matched user's profile when this swipe completes a mutual
    like, otherwise ``None``. Match detection failures degrade to ``None``;
    the swipe itself is persisted regardless.
    """
    store = store or get_store()
    swipe = Swipe(author_id=author_id, swiped_profile_id=swiped_profile_id, type=SwipeType(swipe_type))
    swipe_store = SwipeStore(store)
    detector = MatchDetector(store, swipe_store)

    matched_user_data: dict[str, Any] | None = None

    # A replenish set off by the card removal must already see this swipe.
    with store.deferred_notifications():
        _remove_recommendation_doc(store, swiped_profile_id, author_id)

        try:
            if swipe.type.is_positive and detector.check_match(swipe):
                author = fetch_user_data(store, author_id)
                matched_user_data = fetch_user_data(store, swiped_profile_id)
                if author and matched_user_data:
                    dispatch(detector.did_detect_new_match, author, matched_user_data)
                else:
                    logger.info("Match %s/%s missing a profile, skipping", author_id, swiped_profile_id)
                    matched_user_data = None
        except Exception:
            logger.warning("Match detection failed for %s -> %s", author_id, swiped_profile_id, exc_info=True)
            matched_user_data = None

        try:
            swipe_store.record(swipe)
        except Exception:
            logger.error("Failed to persist swipe %s -> %s", author_id, swiped_profile_id, exc_info=True)

    record_event("swipe", {
        "author_id": author_id,
        "swiped_profile_id": swiped_profile_id,
        "swipe_type": swipe.type.value,
        "matched": matched_user_data is not None,
    })

    return matched_user_data


def list_matches(
    user_id: str,
    page: int = 0,
    size: int = 20,
    store: InMemoryDocumentStore | None = None,
) -> MatchListResponse:
    """One page of a user's matches, newest first. Never fails."""
    store = store or get_store()
    try:
        docs = store.query(
            matches_collection(user_id),
            order_by="createdAt",
            descending=True,
            offset=page * size,
            limit=size,
        )
        matches = [MatchRecord.model_validate(doc.data) for doc in docs]
    except Exception:
        logger.warning("Failed to fetch matches for %s", user_id, exc_info=True)
        return MatchListResponse(matches=[], success=True)

    logger.debug("Fetched %d matches for %s", len(matches), user_id)
    return MatchListResponse(matches=matches, success=True)
