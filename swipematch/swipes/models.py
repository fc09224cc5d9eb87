from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SwipeType(str, Enum):
    like = "like"
    dislike = "dislike"
    superlike = "superlike"

    @property
    def category(self) -> str:
        return f"{self.value}s"

    @property
    def is_positive(self) -> bool:
        return self in (SwipeType.like, SwipeType.superlike)


class Swipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    author_id: str = Field(..., min_length=1, alias="authorID")
    swiped_profile_id: str = Field(..., min_length=1, alias="swipedProfileID")
    type: SwipeType

    def to_document(self) -> dict[str, str]:
        return {
            "authorID": self.author_id,
            "swipedProfileID": self.swiped_profile_id,
            "type": self.type.value,
        }
