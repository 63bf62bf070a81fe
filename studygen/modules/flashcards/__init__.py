"""Flashcards module exports."""

from .models.flashcards import FLASHCARD_SHAPE, Flashcard
from .generator import build_request, generate_flashcards

__all__ = [
    "FLASHCARD_SHAPE",
    "Flashcard",
    "build_request",
    "generate_flashcards",
]
