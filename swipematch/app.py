from __future__ import annotations

from fastapi import FastAPI, Query

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .matches.models import MatchListResponse, SwipeRequest, SwipeResponse
from .matches.service import list_matches, submit_swipe
from .recommendations.models import RecommendationPage
from .recommendations.retrieval import get_recommendations
from .recommendations.triggers import register_triggers
from .storage.document_store import get_store

app = FastAPI(title="Swipe Matching API", version="1.0.0")

# Recommendation upkeep runs off store change notifications.
register_triggers(get_store())


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Swipes & matches ─────────────────────────────────────────────────────


@app.post("/swipes", response_model=SwipeResponse)
def swipe(body: SwipeRequest) -> SwipeResponse:
    matched_user = submit_swipe(body.author_id, body.swiped_profile_id, body.type)
    return SwipeResponse(matched_user=matched_user)


@app.get("/matches/{user_id}", response_model=MatchListResponse)
def matches(
    user_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
) -> MatchListResponse:
    return list_matches(user_id, page, size)


# ── Recommendations ──────────────────────────────────────────────────────


@app.get("/recommendations/{user_id}", response_model=RecommendationPage)
def recommendations(
    user_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
) -> RecommendationPage:
    return get_recommendations(user_id, page, size)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())
