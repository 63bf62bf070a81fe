"""Models for AI feedback on a student's own explanation of a concept."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studygen.modules.generation.shapes import FieldKind, FieldSpec, RecordShape

DEFAULT_NEXT_STEP = "Keep practicing!"


class LectureRef(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    url: str
    subject: str = ""
    unit_title: str = Field(default="", alias="unitTitle")


class ExplanationAttempt(BaseModel):
    subject: str
    prompt: str
    explanation: str
    key_concepts: list[str] = Field(default_factory=list)
    student_name: Optional[str] = None


class NextSteps(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = DEFAULT_NEXT_STEP
    lecture_index: Optional[int] = Field(default=None, alias="lectureIndex")


class FeedbackDraft(BaseModel):
    """Feedback exactly as validated from model output."""

    model_config = ConfigDict(populate_by_name=True)

    correct: str
    missing: str
    needs_lecture: bool = Field(default=False, alias="needsLecture")
    next_steps: Optional[NextSteps] = Field(default=None, alias="nextSteps")


class Feedback(BaseModel):
    correct: str
    missing: str
    next_step: str = DEFAULT_NEXT_STEP
    lecture: Optional[LectureRef] = None
    produced_by: Optional[str] = None


NEXT_STEPS_SHAPE = RecordShape(
    name="next_steps",
    model=NextSteps,
    fields=(
        FieldSpec("text", required=False, default=DEFAULT_NEXT_STEP),
        FieldSpec(
            "lectureIndex",
            kind=FieldKind.INTEGER,
            required=False,
            aliases=("lecture_index",),
        ),
    ),
)

FEEDBACK_SHAPE = RecordShape(
    name="explain_it",
    model=FeedbackDraft,
    fields=(
        FieldSpec("correct"),
        FieldSpec("missing"),
        FieldSpec(
            "needsLecture",
            kind=FieldKind.BOOLEAN,
            required=False,
            default=False,
            aliases=("needs_lecture",),
        ),
        FieldSpec(
            "nextSteps",
            kind=FieldKind.RECORD,
            required=False,
            aliases=("next_steps",),
            shape=NEXT_STEPS_SHAPE,
        ),
    ),
)
