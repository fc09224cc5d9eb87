from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..swipes.models import SwipeType


class MatchRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    match: dict[str, Any]
    has_been_seen: bool = Field(default=False, alias="hasBeenSeen")
    created_at: float | None = Field(default=None, alias="createdAt")


class SwipeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    author_id: str = Field(..., min_length=1, alias="authorID")
    swiped_profile_id: str = Field(..., min_length=1, alias="swipedProfileID")
    type: SwipeType

    @model_validator(mode="after")
    def _not_self(self) -> "SwipeRequest":
        if self.author_id == self.swiped_profile_id:
            raise ValueError("A user cannot swipe on their own profile")
        return self


class SwipeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    matched_user: dict[str, Any] | None = Field(default=None, alias="matchedUser")


class MatchListResponse(BaseModel):
    matches: list[MatchRecord] = Field(default_factory=list)
    success: bool = True
