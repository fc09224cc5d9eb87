"""Shared fixtures: a fresh store per test and a profile factory."""
from __future__ import annotations

import itertools

import pytest

from swipematch.analytics.store import clear_events
from swipematch.notifications.dispatcher import drain
from swipematch.notifications.push import clear_outbox
from swipematch.storage.document_store import InMemoryDocumentStore
from swipematch.storage.paths import user_path

_clock = itertools.count(1_000)


def build_user(user_id: str, **overrides) -> dict:
    """A complete, indexed, visible profile at (0, 0) unless overridden."""
    latitude = overrides.pop("latitude", 0.0)
    longitude = overrides.pop("longitude", 0.0)
    user = {
        "id": user_id,
        "firstName": user_id.title(),
        "email": f"{user_id}@example.com",
        "profilePictureURL": f"https://img.example.com/{user_id}.jpg",
        "createdAt": float(next(_clock)),
        "location": {"latitude": latitude, "longitude": longitude},
        "coordinates": {"latitude": latitude, "longitude": longitude},
        "g": {"geopoint": {"latitude": latitude, "longitude": longitude}},
        "settings": {
            "distance_radius": "unlimited",
            "gender": "female",
            "gender_preference": "all",
            "show_me": True,
        },
    }
    settings = overrides.pop("settings", None)
    if settings is not None:
        user["settings"] = {**user["settings"], **settings}
    user.update(overrides)
    return user


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def make_user(store):
    def _make(user_id: str, **overrides) -> dict:
        user = build_user(user_id, **overrides)
        store.set(user_path(user_id), user)
        return user

    return _make


@pytest.fixture(autouse=True)
def _clean_side_channels():
    clear_events()
    clear_outbox()
    yield
    drain()
