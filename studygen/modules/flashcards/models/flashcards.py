"""Pydantic models and record shape for generated flashcards."""

from typing import Optional

from pydantic import BaseModel

from studygen.modules.generation.shapes import FieldSpec, RecordShape


class Flashcard(BaseModel):
    """Question/answer flashcard with an optional hint."""

    question: str
    hint: Optional[str] = None
    answer: str


FLASHCARD_SHAPE = RecordShape(
    name="flashcards",
    model=Flashcard,
    fields=(
        FieldSpec("question", aliases=("front", "q")),
        FieldSpec("hint", required=False),
        FieldSpec("answer", aliases=("back", "a")),
    ),
    envelope="cards",
    salvage_keys=("question", "answer"),
    identity_key="question",
)
