from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studygen.modules.recommendations.models.recommendations import (
    ChapterResources,
    Recommendation,
    RecommendationSource,
)


class RecommendationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    test_id: Optional[str] = Field(default=None, alias="testId")
    score: float = Field(..., ge=0)
    max_marks: float = Field(..., gt=0, alias="maxMarks")
    subject: str = Field(..., min_length=1)
    exam_type: str = Field(default="JEE", alias="examType")
    grade: str = "11"
    chapters: list[ChapterResources] = Field(default_factory=list)


class RecommendationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recommendations: list[Recommendation] = Field(default_factory=list)
    source: RecommendationSource
    produced_by: Optional[str] = Field(default=None, alias="producedBy")
