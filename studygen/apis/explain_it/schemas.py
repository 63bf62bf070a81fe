from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studygen.modules.feedback.models.feedback import LectureRef


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject: str = Field(..., min_length=1)
    chapter: Optional[str] = None
    prompt: str = Field(..., min_length=1)
    key_concepts: list[str] = Field(default_factory=list, alias="keyConcepts")
    explanation: str = ""
    student_name: Optional[str] = Field(default=None, alias="studentName")
    lectures: list[LectureRef] = Field(default_factory=list)


class NextStepsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    lecture_slug: Optional[str] = Field(default=None, alias="lectureSlug")
    lecture_title: Optional[str] = Field(default=None, alias="lectureTitle")


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    correct: str
    missing: str
    next_steps: NextStepsOut = Field(alias="nextSteps")
