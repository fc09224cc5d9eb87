from __future__ import annotations

import logging
import time
from typing import Any

from ..storage.document_store import InMemoryDocumentStore
from ..storage.paths import NOTIFICATIONS, user_path
from .config import DEFAULT_NOTIFICATION_CONFIG, NotificationConfig

logger = logging.getLogger(__name__)

_outbox: list[dict[str, Any]] = []


def send_push_notification(
    store: InMemoryDocumentStore,
    to_user_id: str,
    title: str,
    body: str,
    category: str,
    metadata: dict[str, Any] | None = None,
    config: NotificationConfig = DEFAULT_NOTIFICATION_CONFIG,
) -> dict[str, Any] | None:
    """
    Record a notification for ``to_user_id`` and hand it to the push channel.

    The notification document is always written so clients can list it. The
    push itself is skipped when notifications are disabled or the user has no
    push token. Returns the queued push message, if any.
    """
    notification = {
        "toUserID": to_user_id,
        "title": title,
        "body": body,
        "type": category,
        "metadata": metadata or {},
        "seen": False,
        "createdAt": time.time(),
    }
    store.add(NOTIFICATIONS, notification)

    if not config.enabled:
        return None

    recipient = store.get(user_path(to_user_id))
    token = (recipient or {}).get("pushToken")
    if not token:
        logger.info("No push token for user %s, notification stored only", to_user_id)
        return None

    message = {"token": token, "title": title, "body": body, "data": {"type": category}}
    _outbox.append(message)
    return message


def get_outbox() -> list[dict[str, Any]]:
    return _outbox


def clear_outbox() -> None:
    _outbox.clear()
