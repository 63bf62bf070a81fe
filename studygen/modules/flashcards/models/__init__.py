from .flashcards import FLASHCARD_SHAPE, Flashcard

__all__ = [
    "FLASHCARD_SHAPE",
    "Flashcard",
]
