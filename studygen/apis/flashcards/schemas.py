from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studygen.modules.flashcards.generator import MAX_CARDS
from studygen.modules.flashcards.models.flashcards import Flashcard


class GenerateFlashcardsRequest(BaseModel):
    subject: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    count: int = Field(default=10, ge=1, le=MAX_CARDS)


class GenerateFlashcardsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cards: list[Flashcard] = Field(default_factory=list)
    produced_by: Optional[str] = Field(default=None, alias="producedBy")
