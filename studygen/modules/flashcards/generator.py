"""Flashcard generation on top of the fallback pipeline.

``generate_flashcards`` asks for ``count`` cards and, if the model falls
short, runs one supplemental round for the rest. The outcome is returned
as-is so callers decide how to present a failure.
"""

from __future__ import annotations

from typing import Sequence

from studygen.modules.flashcards.models.flashcards import FLASHCARD_SHAPE, Flashcard
from studygen.modules.generation.completion import YieldCompletionController
from studygen.modules.generation.models import (
    GenerationOutcome,
    GenerationRequest,
    ModelConfig,
)

MAX_CARDS = 50
MIN_ACCEPTABLE_CARDS = 5

INSTRUCTION = """Generate $count JEE/NEET flashcards for "$topic" in $subject.

IMPORTANT: Return ONLY a JSON array. No explanations, no markdown.

Format each card as:
{"question": "...", "hint": "..." or null, "answer": "..."}

Use $...$ for math formulas.

Return ONLY the JSON array starting with [ and ending with ]"""

SUPPLEMENTAL_INSTRUCTION = """Generate $count MORE JEE/NEET flashcards for "$topic" in $subject.
Return ONLY a JSON array like: [{"question": "...", "hint": "..." or null, "answer": "..."}]
Use $...$ for formulas."""


def build_request(subject: str, topic: str, count: int) -> GenerationRequest:
    return GenerationRequest(
        instruction=INSTRUCTION,
        supplemental_instruction=SUPPLEMENTAL_INSTRUCTION,
        subject=subject.strip(),
        topic=topic.strip(),
        target_count=count,
    )


async def generate_flashcards(
    controller: YieldCompletionController,
    configs: Sequence[ModelConfig],
    subject: str,
    topic: str,
    count: int = 10,
) -> GenerationOutcome[Flashcard]:
    """Generate up to ``count`` validated flashcards for ``topic``."""
    if not subject.strip() or not topic.strip():
        raise ValueError("Subject and topic are required")
    count = max(1, min(int(count), MAX_CARDS))
    return await controller.generate_with_target(
        build_request(subject, topic, count),
        configs,
        FLASHCARD_SHAPE,
        target_count=count,
        min_acceptable=min(MIN_ACCEPTABLE_CARDS, count),
    )
