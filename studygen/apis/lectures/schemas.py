from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studygen.modules.lectures.models.lectures import ChapterInfo, MatchSource


class FindLectureRequest(BaseModel):
    question: str = Field(..., min_length=1)
    chapters: list[ChapterInfo] = Field(default_factory=list)


class FindLectureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lecture: Optional[ChapterInfo] = None
    source: Optional[MatchSource] = None
    produced_by: Optional[str] = Field(default=None, alias="producedBy")
