"""Recommend lectures after a test, with a deterministic fallback.

The model picks 2-3 chapters from the caller's library and explains why.
When every candidate model fails the student still gets a useful answer
built locally from the first chapters of the library.
"""

from __future__ import annotations

import json
from typing import Sequence

from studygen.core.logging import get_logger
from studygen.modules.generation.models import (
    GenerationRequest,
    GenerationSuccess,
    ModelConfig,
)
from studygen.modules.generation.orchestrator import FallbackOrchestrator
from studygen.modules.recommendations.models.recommendations import (
    RECOMMENDATION_SHAPE,
    ChapterResources,
    Recommendation,
    RecommendationSet,
    RecommendationSource,
    ResourceType,
    ScoreReport,
)

logger = get_logger(__name__)

MAX_RECOMMENDATIONS = 3

INSTRUCTION = """You are an educational AI assistant helping a $exam_type aspirant (Class $grade).

The student just took a test in $subject and scored $score/$max_marks ($percentage%).
Performance Level: $level

Based on this performance, recommend lectures from our library to help them improve.

Available Chapters and Resources:
$catalog

Instructions:
1. Select 2-3 chapters that would be most beneficial for this student
2. For each chapter, pick 1-2 resources (prefer a mix of video and quiz/pyq)
3. Provide a brief, encouraging reason why this chapter/resource will help them

Return ONLY valid JSON in this exact format (no markdown, no explanation):
{
    "recommendations": [
        {
            "chapterTitle": "Chapter Name",
            "reason": "Brief encouraging reason why this will help",
            "resources": [
                { "title": "Resource Title", "type": "video", "id": "resource-id" },
                { "title": "Resource Title", "type": "quiz", "id": "resource-id" }
            ]
        }
    ]
}"""


def performance_level(percentage: float) -> str:
    if percentage >= 80:
        return "excellent"
    if percentage >= 60:
        return "good"
    if percentage < 40:
        return "needs improvement"
    return "average"


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_request(
    result: ScoreReport, chapters: Sequence[ChapterResources]
) -> GenerationRequest:
    catalog = [
        {
            "title": ch.chapter_title,
            "resources": [
                {"title": r.title, "type": r.type.value, "id": r.id}
                for r in ch.resources
            ],
        }
        for ch in chapters
    ]
    return GenerationRequest(
        instruction=INSTRUCTION,
        subject=result.subject,
        params={
            "exam_type": result.exam_type,
            "grade": result.grade,
            "score": _format_number(result.score),
            "max_marks": _format_number(result.max_marks),
            "percentage": str(result.percentage),
            "level": performance_level(result.percentage),
            "catalog": json.dumps(catalog, indent=2),
        },
    )


def fallback_recommendations(
    chapters: Sequence[ChapterResources], percentage: float
) -> list[Recommendation]:
    """Pick the first chapters with one video and one quiz/pyq each."""
    out: list[Recommendation] = []
    for ch in list(chapters)[:MAX_RECOMMENDATIONS]:
        videos = [r for r in ch.resources if r.type is ResourceType.VIDEO][:1]
        practice = [
            r for r in ch.resources if r.type in (ResourceType.QUIZ, ResourceType.PYQ)
        ][:1]

        title = ch.chapter_title
        if percentage < 40:
            reason = f"Review the fundamentals of {title} to build a stronger foundation."
        elif percentage < 60:
            reason = f"Practice more problems in {title} to improve your score."
        elif percentage < 80:
            reason = f"Master advanced concepts in {title} to reach excellence."
        else:
            reason = f"Challenge yourself with advanced problems in {title}."

        out.append(
            Recommendation(
                chapter_title=title,
                reason=reason,
                resources=[r.model_copy() for r in videos + practice],
            )
        )
    return out


async def recommend(
    orchestrator: FallbackOrchestrator,
    configs: Sequence[ModelConfig],
    result: ScoreReport,
    chapters: Sequence[ChapterResources],
) -> RecommendationSet:
    if not chapters:
        return RecommendationSet(recommendations=[], source=RecommendationSource.NONE)

    outcome = await orchestrator.generate(
        build_request(result, chapters), configs, RECOMMENDATION_SHAPE
    )
    if isinstance(outcome, GenerationSuccess):
        return RecommendationSet(
            recommendations=outcome.records[:MAX_RECOMMENDATIONS],
            source=RecommendationSource.MODEL,
            produced_by=outcome.produced_by.label,
        )

    logger.warning(
        "Recommendation models exhausted; using fallback for %d chapter(s)",
        len(chapters),
    )
    return RecommendationSet(
        recommendations=fallback_recommendations(chapters, result.percentage),
        source=RecommendationSource.FALLBACK,
    )
