"""Personal feedback on a student's explanation ("explain it" practice).

Only a fundamental misunderstanding should lead to a lecture suggestion;
the model flags it with ``needsLecture`` and points at a lecture by index
into the list embedded in the prompt.
"""

from __future__ import annotations

from typing import Optional, Sequence

from studygen.core.logging import get_logger
from studygen.modules.feedback.models.feedback import (
    DEFAULT_NEXT_STEP,
    FEEDBACK_SHAPE,
    ExplanationAttempt,
    Feedback,
    FeedbackDraft,
    LectureRef,
)
from studygen.modules.generation.errors import GenerationError
from studygen.modules.generation.models import (
    GenerationFailure,
    GenerationRequest,
    ModelConfig,
)
from studygen.modules.generation.orchestrator import FallbackOrchestrator

logger = get_logger(__name__)

MIN_EXPLANATION_CHARS = 10
MAX_LECTURES = 30

INSTRUCTION = """You are an expert $subject teacher giving personal feedback to a student named $name.

$name was asked to explain: "$prompt"

Key concepts: $concepts

$name's answer:
\"\"\"
$explanation
\"\"\"

FEEDBACK RULES:
1. Speak to $name using "you"
2. Be encouraging and reference their exact words
3. Be specific about any gaps

CRITICAL LECTURE RULE:

needsLecture = FALSE if $name:
- Understood the CORE CONCEPT (even if details are missing)
- Got the main idea right
- Just needs minor clarification or examples
- Explained it in different but correct words

needsLecture = TRUE ONLY if $name:
- Got the concept COMPLETELY WRONG
- Showed they have NO understanding of basics
- Said something factually incorrect about the fundamentals

Missing details or examples is NOT a reason to suggest a lecture.
Only FUNDAMENTAL MISUNDERSTANDING is a reason to suggest a lecture.

Lectures:
$lectures

JSON response:
{
  "correct": "What $name got right",
  "missing": "What to improve (minor gaps only if they understood the core)",
  "needsLecture": false,
  "nextSteps": {
    "text": "A quick tip",
    "lectureIndex": null
  }
}

REMEMBER: If "correct" shows they understood, needsLecture MUST be false."""


class FeedbackUnavailable(GenerationError):
    """Every candidate model failed to produce usable feedback."""

    def __init__(self, failure: GenerationFailure) -> None:
        super().__init__(f"feedback generation failed: {failure.reason.value}")
        self.failure = failure


def relevant_lectures(
    lectures: Sequence[LectureRef], subject: str
) -> list[LectureRef]:
    needle = subject.strip().lower()
    return [
        lec for lec in lectures if needle in lec.subject.lower()
    ][:MAX_LECTURES]


def build_request(
    attempt: ExplanationAttempt, lectures: Sequence[LectureRef]
) -> GenerationRequest:
    lecture_list = "\n".join(
        f"{i}. {lec.title} ({lec.unit_title})" if lec.unit_title else f"{i}. {lec.title}"
        for i, lec in enumerate(lectures)
    )
    return GenerationRequest(
        instruction=INSTRUCTION,
        subject=attempt.subject,
        params={
            "name": (attempt.student_name or "").strip() or "there",
            "prompt": attempt.prompt,
            "concepts": ", ".join(attempt.key_concepts) or "general understanding",
            "explanation": attempt.explanation.strip(),
            "lectures": lecture_list or "(none)",
        },
    )


def resolve_lecture(
    draft: FeedbackDraft, lectures: Sequence[LectureRef]
) -> Optional[LectureRef]:
    if not draft.needs_lecture or draft.next_steps is None:
        return None
    index = draft.next_steps.lecture_index
    if index is None or not 0 <= index < len(lectures):
        return None
    return lectures[index]


async def analyze_explanation(
    orchestrator: FallbackOrchestrator,
    configs: Sequence[ModelConfig],
    attempt: ExplanationAttempt,
    lectures: Sequence[LectureRef] = (),
) -> Feedback:
    """Return feedback for ``attempt``; raises ``FeedbackUnavailable`` on exhaustion."""
    if len(attempt.explanation.strip()) < MIN_EXPLANATION_CHARS:
        raise ValueError("Explanation too short")

    candidates = relevant_lectures(lectures, attempt.subject)
    outcome = await orchestrator.generate(
        build_request(attempt, candidates), configs, FEEDBACK_SHAPE
    )
    if isinstance(outcome, GenerationFailure):
        raise FeedbackUnavailable(outcome)

    draft = outcome.records[0]
    lecture = resolve_lecture(draft, candidates)
    if lecture is not None:
        logger.info("Suggesting lecture: %s", lecture.title)
    return Feedback(
        correct=draft.correct,
        missing=draft.missing,
        next_step=draft.next_steps.text if draft.next_steps else DEFAULT_NEXT_STEP,
        lecture=lecture,
        produced_by=outcome.produced_by.label,
    )
