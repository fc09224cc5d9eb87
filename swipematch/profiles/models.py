from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Location(BaseModel):
    latitude: float | None = None
    longitude: float | None = None

    @property
    def is_complete(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class UserSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    distance_radius: str = "unlimited"
    gender: str = "none"
    gender_preference: str = "all"
    show_me: bool = True

    @field_validator("distance_radius", mode="before")
    @classmethod
    def _radius_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


DEFAULT_USER_SETTINGS = UserSettings()


class UserProfile(BaseModel):
    """
    A stored user document.

    ``location`` and ``settings`` are optional; read ``effective_settings``
    for the settings with defaults filled in. Unknown fields are kept.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    phone: str | None = None
    profile_picture_url: str | None = Field(default=None, alias="profilePictureURL")
    push_token: str | None = Field(default=None, alias="pushToken")
    created_at: float | None = Field(default=None, alias="createdAt")
    location: Location | None = None
    settings: UserSettings | None = None
    has_computed_recommendations: bool = Field(default=False, alias="hasComputedRecommendations")
    current_recommendation_size: int = Field(default=0, alias="currentRecommendationSize")
    coordinates: Location | None = None
    g: dict[str, Any] | None = None

    @property
    def effective_settings(self) -> UserSettings:
        return self.settings or DEFAULT_USER_SETTINGS

    @property
    def has_location(self) -> bool:
        return self.location is not None and self.location.is_complete
