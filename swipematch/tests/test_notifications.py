from __future__ import annotations

import logging

from swipematch.notifications.config import NotificationConfig
from swipematch.notifications.dispatcher import dispatch, drain
from swipematch.notifications.push import get_outbox, send_push_notification


def test_push_goes_to_users_token(store, make_user):
    make_user("bob", pushToken="tok-1")
    message = send_push_notification(store, "bob", "Hi", "There", "dating_match", {"k": "v"})
    assert message == {"token": "tok-1", "title": "Hi", "body": "There", "data": {"type": "dating_match"}}
    assert get_outbox() == [message]
    assert store.count("notifications") == 1


def test_no_token_stores_notification_only(store, make_user):
    make_user("bob")
    assert send_push_notification(store, "bob", "Hi", "There", "dating_match") is None
    assert get_outbox() == []
    assert store.count("notifications") == 1


def test_disabled_push_stores_notification_only(store, make_user):
    make_user("bob", pushToken="tok-1")
    config = NotificationConfig(enabled=False)
    assert send_push_notification(store, "bob", "Hi", "There", "dating_match", config=config) is None
    assert get_outbox() == []
    assert store.count("notifications") == 1


def test_dispatch_runs_in_background():
    results = []
    dispatch(results.append, 42)
    drain()
    assert results == [42]


def test_dispatch_failure_is_logged_not_raised(caplog):
    def boom():
        raise RuntimeError("gateway down")

    with caplog.at_level(logging.ERROR, logger="swipematch.notifications.dispatcher"):
        future = dispatch(boom)
        drain()

    assert isinstance(future.exception(), RuntimeError)
    assert "Background task failed" in caplog.text
