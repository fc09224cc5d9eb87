from __future__ import annotations

import pytest
from pydantic import ValidationError

from swipematch.swipes.models import Swipe, SwipeType
from swipematch.swipes.store import SwipeStore


def _swipe(author, target, kind):
    return Swipe(author_id=author, swiped_profile_id=target, type=SwipeType(kind))


@pytest.fixture
def swipes(store):
    return SwipeStore(store)


def test_record_stores_under_type_category(store, swipes):
    swipes.record(_swipe("a", "b", "superlike"))
    assert store.get("user_swipes/a/superlikes/b") == {
        "authorID": "a",
        "swipedProfileID": "b",
        "type": "superlike",
    }


def test_latest_swipe_in_a_category_wins(store, swipes):
    swipes.record(_swipe("a", "b", "like"))
    store.set("user_swipes/a/likes/b", {"authorID": "a", "swipedProfileID": "b", "type": "stale"})
    swipes.record(_swipe("a", "b", "like"))
    assert store.get("user_swipes/a/likes/b")["type"] == "like"
    assert store.count("user_swipes/a/likes") == 1


class TestReciprocity:
    def test_like_answered_by_like(self, swipes):
        swipes.record(_swipe("b", "a", "like"))
        assert swipes.has_reciprocal_swipe("b", "a", SwipeType.like)

    def test_superlike_answered_by_superlike(self, swipes):
        swipes.record(_swipe("b", "a", "superlike"))
        assert swipes.has_reciprocal_swipe("b", "a", SwipeType.superlike)

    def test_like_answered_by_superlike_is_not_reciprocal(self, swipes):
        swipes.record(_swipe("b", "a", "superlike"))
        assert not swipes.has_reciprocal_swipe("b", "a", SwipeType.like)

    def test_superlike_answered_by_like_is_not_reciprocal(self, swipes):
        swipes.record(_swipe("b", "a", "like"))
        assert not swipes.has_reciprocal_swipe("b", "a", SwipeType.superlike)

    def test_dislike_is_not_a_like(self, swipes):
        swipes.record(_swipe("b", "a", "dislike"))
        assert not swipes.has_reciprocal_swipe("b", "a", SwipeType.like)

    def test_direction_matters(self, swipes):
        swipes.record(_swipe("a", "b", "like"))
        assert not swipes.has_reciprocal_swipe("b", "a", SwipeType.like)


def test_all_swipes_merges_every_category(swipes):
    swipes.record(_swipe("a", "b", "like"))
    swipes.record(_swipe("a", "c", "dislike"))
    swipes.record(_swipe("a", "d", "superlike"))
    swipes.record(_swipe("z", "e", "like"))

    assert swipes.all_swipes_for_user("a") == {"b": "like", "c": "dislike", "d": "superlike"}


def test_dislike_overrides_like_for_same_target(swipes):
    swipes.record(_swipe("a", "b", "like"))
    swipes.record(_swipe("a", "b", "dislike"))
    assert swipes.all_swipes_for_user("a") == {"b": "dislike"}


def test_swipe_rejects_unknown_type():
    with pytest.raises(ValidationError):
        Swipe(authorID="a", swipedProfileID="b", type="poke")
