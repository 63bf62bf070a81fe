"""Models for post-test lecture recommendations."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studygen.modules.generation.shapes import FieldKind, FieldSpec, RecordShape


class ResourceType(str, Enum):
    VIDEO = "video"
    QUIZ = "quiz"
    PYQ = "pyq"


class Resource(BaseModel):
    title: str
    type: ResourceType
    id: str


class ChapterResources(BaseModel):
    """A chapter of the lecture library offered to the model as context."""

    model_config = ConfigDict(populate_by_name=True)

    chapter_title: str = Field(alias="chapterTitle")
    resources: list[Resource] = Field(default_factory=list)


class Recommendation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chapter_title: str = Field(alias="chapterTitle")
    reason: str
    resources: list[Resource] = Field(default_factory=list)


class ScoreReport(BaseModel):
    score: float = Field(ge=0)
    max_marks: float = Field(gt=0)
    subject: str
    exam_type: str = "JEE"
    grade: str = "11"

    @property
    def percentage(self) -> int:
        # Halves round up, not to even
        return math.floor(self.score / self.max_marks * 100 + 0.5)


class RecommendationSource(str, Enum):
    MODEL = "model"
    FALLBACK = "fallback"
    NONE = "none"


class RecommendationSet(BaseModel):
    recommendations: list[Recommendation] = Field(default_factory=list)
    source: RecommendationSource
    produced_by: Optional[str] = None


RESOURCE_SHAPE = RecordShape(
    name="resources",
    model=Resource,
    fields=(
        FieldSpec("title"),
        FieldSpec("type", choices=tuple(t.value for t in ResourceType)),
        FieldSpec("id", aliases=("resourceId", "resource_id")),
    ),
)

RECOMMENDATION_SHAPE = RecordShape(
    name="recommendations",
    model=Recommendation,
    fields=(
        FieldSpec("chapterTitle", aliases=("chapter_title", "chapter", "title")),
        FieldSpec("reason"),
        FieldSpec(
            "resources",
            kind=FieldKind.RECORDS,
            required=False,
            shape=RESOURCE_SHAPE,
        ),
    ),
    envelope="recommendations",
    identity_key="chapterTitle",
)
