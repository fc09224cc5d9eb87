from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecommendationPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recommendations: list[dict[str, Any]] = Field(default_factory=list)
    is_computing_recommendation: bool = Field(default=False, alias="isComputingRecommendation")
    total: int = 0
