from __future__ import annotations

from unittest.mock import patch

from swipematch.profiles.repository import fetch_user
from swipematch.recommendations.candidates import CandidateSource
from swipematch.recommendations.config import RecommendationConfig


def _ids(candidates):
    return [c["id"] for c in candidates]


# ── Geo-proximity strategy ───────────────────────────────────────────────


class TestGeoProximity:
    def _setup(self, make_user, **me_settings):
        make_user("me", settings={"distance_radius": "10 miles", **me_settings})
        make_user("close", longitude=0.05)
        make_user("nearby", longitude=0.1, settings={"gender": "male"})
        make_user("far", longitude=1.0)

    def test_only_candidates_within_radius_nearest_first(self, store, make_user):
        self._setup(make_user)
        me = fetch_user(store, "me")

        candidates = CandidateSource(store).fetch(me, {})

        assert _ids(candidates) == ["close", "nearby"]
        assert candidates[0]["distance"] == "3 miles away"
        assert candidates[1]["distance"] == "7 miles away"

    def test_gender_preference_filters(self, store, make_user):
        self._setup(make_user, gender_preference="male")
        me = fetch_user(store, "me")
        assert _ids(CandidateSource(store).fetch(me, {})) == ["nearby"]

    def test_hidden_profiles_excluded(self, store, make_user):
        self._setup(make_user)
        make_user("hidden", longitude=0.02, settings={"show_me": False})
        me = fetch_user(store, "me")
        assert "hidden" not in _ids(CandidateSource(store).fetch(me, {}))

    def test_swiped_profiles_excluded(self, store, make_user):
        self._setup(make_user)
        me = fetch_user(store, "me")
        assert _ids(CandidateSource(store).fetch(me, {"close": "dislike"})) == ["nearby"]

    def test_strategy(self, store, make_user):
        self._setup(make_user)
        assert CandidateSource(store).strategy_for(fetch_user(store, "me")) == "geo"


# ── Unbounded strategy ───────────────────────────────────────────────────


def _pool(make_user, size):
    for i in range(size):
        make_user(f"c{i:03d}", longitude=1.0)


class TestUnbounded:
    def test_stops_at_ceiling_without_second_page(self, store, make_user):
        make_user("me")
        _pool(make_user, 250)
        me = fetch_user(store, "me")
        source = CandidateSource(store)

        with patch.object(store, "query", wraps=store.query) as query:
            candidates = source.fetch(me, {})

        assert len(candidates) == 200
        assert query.call_count == 1
        assert "me" not in _ids(candidates)

    def test_newest_profiles_first(self, store, make_user):
        make_user("me")
        _pool(make_user, 5)
        candidates = CandidateSource(store).fetch(fetch_user(store, "me"), {})
        assert _ids(candidates) == ["c004", "c003", "c002", "c001", "c000"]
        assert all(c["distance"] == "69 miles away" for c in candidates)

    def test_small_pool_ends_on_empty_page(self, store, make_user):
        make_user("me")
        _pool(make_user, 30)
        me = fetch_user(store, "me")

        with patch.object(store, "query", wraps=store.query) as query:
            candidates = CandidateSource(store).fetch(me, {})

        assert len(candidates) == 30
        assert query.call_count == 2

    def test_accumulates_across_small_pages_up_to_ceiling(self, store, make_user):
        make_user("me")
        _pool(make_user, 250)
        me = fetch_user(store, "me")
        source = CandidateSource(store, RecommendationConfig(page_size=60))

        with patch.object(store, "query", wraps=store.query) as query:
            candidates = source.fetch(me, {})

        assert len(candidates) == 200
        assert len(set(_ids(candidates))) == 200
        assert query.call_count == 4

    def test_swiped_profiles_do_not_count_toward_ceiling(self, store, make_user):
        make_user("me")
        _pool(make_user, 250)
        swipes = {f"c{i:03d}": "like" for i in range(100)}
        candidates = CandidateSource(store).fetch(fetch_user(store, "me"), swipes)

        assert len(candidates) == 150
        assert not set(_ids(candidates)) & set(swipes)

    def test_gender_preference_filters(self, store, make_user):
        make_user("me", settings={"gender_preference": "male"})
        make_user("m1", settings={"gender": "male"})
        make_user("f1", settings={"gender": "female"})
        candidates = CandidateSource(store).fetch(fetch_user(store, "me"), {})
        assert _ids(candidates) == ["m1"]

    def test_candidates_without_location_are_skipped(self, store, make_user):
        make_user("me")
        make_user("nowhere", location=None)
        make_user("somewhere", longitude=0.5)
        candidates = CandidateSource(store).fetch(fetch_user(store, "me"), {})
        assert _ids(candidates) == ["somewhere"]
