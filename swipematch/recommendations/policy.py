"""
Decides when a user's recommendation set has to be rebuilt.

Everything here is a pure function of stored profile state, so the triggers
can be reasoned about (and tested) without a store.
"""
from __future__ import annotations

from enum import Enum

from ..profiles.models import UserProfile
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig

UNLIMITED = "unlimited"


class ProfileWriteAction(str, Enum):
    skip = "skip"
    recompute = "recompute"
    update_geo_index = "update_geo_index"
    backfill_settings = "backfill_settings"


def eligible_for_first_compute(
    user: UserProfile,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> bool:
    """A complete-enough profile that has never had recommendations."""
    if not (user.first_name or "").strip():
        return False
    if not (user.email or user.phone):
        return False
    if not user.profile_picture_url:
        return False
    if config.require_custom_avatar and user.profile_picture_url == config.default_avatar:
        return False
    return not user.has_computed_recommendations


def settings_meaningfully_changed(prev: UserProfile | None, new: UserProfile) -> bool:
    """Only distance radius and gender preference change who is recommended."""
    prev_settings = prev.effective_settings if prev else new.effective_settings
    new_settings = new.effective_settings
    return (
        prev_settings.distance_radius != new_settings.distance_radius
        or prev_settings.gender_preference != new_settings.gender_preference
    )


def get_distance_radius(user: UserProfile) -> str:
    """``"unlimited"`` or the numeric part of the radius setting (``"25 miles"`` -> ``"25"``)."""
    radius = (user.effective_settings.distance_radius or "").strip()
    if not radius or radius.lower() == UNLIMITED:
        return UNLIMITED
    return radius.split(" ")[0]


def needs_geo_index_update(user: UserProfile) -> bool:
    if not user.g or user.coordinates is None or user.location is None:
        return True
    return (
        user.coordinates.latitude != user.location.latitude
        or user.coordinates.longitude != user.location.longitude
    )


def should_replenish(
    remaining: int,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> bool:
    return remaining <= config.min_batch_allowed


def decide_on_profile_write(
    prev: UserProfile | None,
    new: UserProfile | None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> ProfileWriteAction:
    if new is None or not new.has_location:
        return ProfileWriteAction.skip

    # New settings invalidate an existing set straight away.
    if new.has_computed_recommendations and settings_meaningfully_changed(prev, new):
        return ProfileWriteAction.recompute

    # Incomplete profiles stay out of the candidate pool until their first compute.
    if not new.has_computed_recommendations and not eligible_for_first_compute(new, config):
        return ProfileWriteAction.skip

    if needs_geo_index_update(new):
        return ProfileWriteAction.update_geo_index

    if new.settings is None:
        return ProfileWriteAction.backfill_settings

    if eligible_for_first_compute(new, config):
        return ProfileWriteAction.recompute

    return ProfileWriteAction.skip
