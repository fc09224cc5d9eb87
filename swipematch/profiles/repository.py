from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..storage.document_store import InMemoryDocumentStore
from ..storage.paths import user_path
from .models import UserProfile

logger = logging.getLogger(__name__)


def fetch_user_data(store: InMemoryDocumentStore, user_id: str) -> dict[str, Any] | None:
    """Raw stored profile, or ``None`` when the user does not exist."""
    return store.get(user_path(user_id))


def parse_user(data: dict[str, Any] | None) -> UserProfile | None:
    """Validate a stored profile. Malformed documents read as missing."""
    if not data:
        return None
    try:
        return UserProfile.model_validate(data)
    except ValidationError:
        logger.warning("Malformed user document %s", data.get("id"), exc_info=True)
        return None


def fetch_user(store: InMemoryDocumentStore, user_id: str) -> UserProfile | None:
    return parse_user(fetch_user_data(store, user_id))


def update_user(store: InMemoryDocumentStore, user_id: str, data: dict[str, Any]) -> None:
    store.update(user_path(user_id), data)
