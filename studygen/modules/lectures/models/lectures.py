"""Models for matching a student's question to a lecture chapter."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studygen.modules.generation.shapes import FieldKind, FieldSpec, RecordShape


class ChapterInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    unit_title: str = Field(default="", alias="unitTitle")
    subject: str = ""
    url: str
    description: str = ""


class LecturePick(BaseModel):
    # -1 means no chapter fits the question
    index: int


class MatchSource(str, Enum):
    MODEL = "model"
    KEYWORD = "keyword"


class LectureMatch(BaseModel):
    chapter: ChapterInfo
    source: MatchSource
    produced_by: Optional[str] = None


LECTURE_PICK_SHAPE = RecordShape(
    name="lecture_finder",
    model=LecturePick,
    fields=(
        FieldSpec(
            "index",
            kind=FieldKind.INTEGER,
            aliases=("lectureIndex", "lecture_index"),
        ),
    ),
)
