from __future__ import annotations

import logging

from ..storage.document_store import InMemoryDocumentStore, get_store
from ..storage.paths import recommendation_flag_path, recommendations_collection
from .models import RecommendationPage

logger = logging.getLogger(__name__)


def get_recommendations(
    user_id: str,
    page: int = 0,
    size: int = 20,
    store: InMemoryDocumentStore | None = None,
) -> RecommendationPage:
    """One page of the stored recommendation set, in the order it was written."""
    store = store or get_store()
    collection = recommendations_collection(user_id)

    try:
        flag = store.get(recommendation_flag_path(user_id)) or {}
        docs = store.query(collection, offset=page * size, limit=size)
        total = store.count(collection)
    except Exception:
        logger.warning("Failed to read recommendations for %s", user_id, exc_info=True)
        return RecommendationPage()

    return RecommendationPage(
        recommendations=[doc.data for doc in docs],
        is_computing_recommendation=bool(flag.get("isComputingRecommendation", False)),
        total=total,
    )
