from __future__ import annotations

from ..storage.document_store import InMemoryDocumentStore
from ..storage.paths import swipe_category, swipe_path
from .models import Swipe, SwipeType

# Merge order for the exclusion map; later categories win for the same target.
EXCLUSION_CATEGORIES = (
    SwipeType.like.category,
    SwipeType.superlike.category,
    SwipeType.dislike.category,
)


class SwipeStore:
    """Per-author swipe history, one document per (category, target)."""

    def __init__(self, store: InMemoryDocumentStore) -> None:
        self.store = store

    def record(self, swipe: Swipe) -> None:
        self.store.set(
            swipe_path(swipe.author_id, swipe.type.category, swipe.swiped_profile_id),
            swipe.to_document(),
        )

    def has_reciprocal_swipe(
        self,
        swiped_profile_id: str,
        author_id: str,
        swipe_type: SwipeType,
    ) -> bool:
        """
        True when ``swiped_profile_id`` already swiped ``author_id`` with the
        same type. A like answered by a superlike (or the reverse) does not count.
        """
        other = self.store.get(swipe_path(swiped_profile_id, swipe_type.category, author_id))
        if other is None:
            return False
        return other.get("type") == swipe_type.value

    def all_swipes_for_user(self, user_id: str) -> dict[str, str]:
        """Map of every profile the user swiped to the swipe type."""
        swipes: dict[str, str] = {}
        for category in EXCLUSION_CATEGORIES:
            for doc in self.store.list_documents(swipe_category(user_id, category)):
                target = doc.data.get("swipedProfileID") or doc.id
                swipes[target] = doc.data.get("type", category[:-1])
        return swipes
