from __future__ import annotations

from dataclasses import dataclass, field

from ..geo.distance import MILE_TO_KM
from ..profiles.models import DEFAULT_USER_SETTINGS, UserSettings

DEFAULT_AVATAR = "https://www.iosapptemplates.com/wp-content/uploads/2019/06/empty-avatar.jpg"


@dataclass(frozen=True)
class RecommendationConfig:
    """
    Fixed limits for recommendation recomputation.
    """

    batch_fetch_limit: int = 200
    page_size: int = 200
    min_batch_allowed: int = 15
    mile_to_km: float = MILE_TO_KM
    default_settings: UserSettings = field(default_factory=lambda: DEFAULT_USER_SETTINGS)
    require_custom_avatar: bool = False
    default_avatar: str = DEFAULT_AVATAR


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
