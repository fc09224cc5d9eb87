from __future__ import annotations

USERS = "users"
USER_SWIPES = "user_swipes"
MATCHES = "matches"
DATING_RECOMMENDATIONS = "dating_recommendations"
NOTIFICATIONS = "notifications"

USER_PATTERN = f"{USERS}/{{userID}}"
RECOMMENDATION_PATTERN = f"{DATING_RECOMMENDATIONS}/{{userID}}/recommendations/{{recommendationID}}"


def user_path(user_id: str) -> str:
    return f"{USERS}/{user_id}"


def swipe_path(author_id: str, category: str, target_id: str) -> str:
    return f"{USER_SWIPES}/{author_id}/{category}/{target_id}"


def swipe_category(author_id: str, category: str) -> str:
    return f"{USER_SWIPES}/{author_id}/{category}"


def matches_collection(user_id: str) -> str:
    return f"{MATCHES}/{user_id}/my_matches"


def recommendation_flag_path(user_id: str) -> str:
    return f"{DATING_RECOMMENDATIONS}/{user_id}"


def recommendations_collection(user_id: str) -> str:
    return f"{DATING_RECOMMENDATIONS}/{user_id}/recommendations"


def recommendation_path(user_id: str, candidate_id: str) -> str:
    return f"{recommendations_collection(user_id)}/{candidate_id}"
