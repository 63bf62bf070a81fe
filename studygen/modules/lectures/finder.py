"""Point a student's doubt at the lecture chapter that covers it.

A model picks a chapter by index from a numbered catalog. When no model
gives a usable index the question is matched against chapter titles,
unit titles and descriptions by keyword instead.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from studygen.core.logging import get_logger
from studygen.modules.generation.models import (
    GenerationRequest,
    GenerationSuccess,
    ModelConfig,
)
from studygen.modules.generation.orchestrator import FallbackOrchestrator
from studygen.modules.lectures.models.lectures import (
    LECTURE_PICK_SHAPE,
    ChapterInfo,
    LectureMatch,
    MatchSource,
)

logger = get_logger(__name__)

INSTRUCTION = """You are an expert JEE/NEET academic tutor matching student questions to the perfect lecture.

Student Question: "$question"

Available Lectures (format: Index. Subject: Unit > Chapter [Keywords]):
$chapters

MATCHING RULES:
1. Look at the KEYWORDS in brackets - if ANY keyword matches the student's question, prefer that lecture
2. Handle typos: "pully" -> "pulley", "projectal" -> "projectile", "newtons" -> "newton"
3. Match concepts to physics/chemistry topics, e.g. "rope", "string tension" -> pulleys
4. If multiple matches, prefer the one with MORE matching keywords
5. If truly irrelevant (e.g. "best restaurants"), return index -1

Reply with ONLY: { "index": NUMBER }
No markdown, no explanation, just the JSON object."""

STOP_WORDS = frozenset(
    """
    what is the a an how to do can you explain tell me about please help with
    in of for and or but this that these those i my we our concept concepts
    topic topics chapter unit important formula work does from give one are
    there short also hey
    """.split()
)
TEST_WORDS = ("test", "quiz", "pyq", "pyqs", "challenge", "practice")

TITLE_SCORE = 12
UNIT_SCORE = 8
DESCRIPTION_SCORE = 3
MIN_KEYWORD_SCORE = 8

_NON_WORD = re.compile(r"[^a-z0-9\s]")


def extract_keywords(question: str) -> list[str]:
    words = _NON_WORD.sub("", question.lower()).split()
    return [w for w in words if len(w) > 2 and w not in STOP_WORDS]


def is_test_chapter(chapter: ChapterInfo) -> bool:
    title = chapter.title.lower()
    return any(word in title for word in TEST_WORDS)


def keyword_score(keywords: Sequence[str], chapter: ChapterInfo) -> int:
    title = chapter.title.lower()
    unit = chapter.unit_title.lower()
    description = chapter.description.lower()
    score = 0
    for kw in keywords:
        if kw in title:
            score += TITLE_SCORE
        if kw in unit:
            score += UNIT_SCORE
        if kw in description:
            score += DESCRIPTION_SCORE
    return score


def match_by_keywords(
    question: str, chapters: Sequence[ChapterInfo]
) -> Optional[ChapterInfo]:
    """Best scoring non-test chapter, or None when nothing scores high enough."""
    keywords = extract_keywords(question)
    if not keywords:
        return None
    best: Optional[ChapterInfo] = None
    best_score = MIN_KEYWORD_SCORE - 1
    for chapter in chapters:
        if is_test_chapter(chapter):
            continue
        score = keyword_score(keywords, chapter)
        if score > best_score:
            best, best_score = chapter, score
    return best


def build_request(
    question: str, chapters: Sequence[ChapterInfo]
) -> GenerationRequest:
    catalog = "\n".join(
        f"{i}. {ch.subject}: {ch.unit_title} > {ch.title} [Topics: {ch.description}]"
        for i, ch in enumerate(chapters)
    )
    return GenerationRequest(
        instruction=INSTRUCTION,
        params={"question": question.strip(), "chapters": catalog},
    )


async def find_lecture(
    orchestrator: FallbackOrchestrator,
    configs: Sequence[ModelConfig],
    question: str,
    chapters: Sequence[ChapterInfo],
) -> Optional[LectureMatch]:
    """Pick the chapter for ``question``; never raises on model failure."""
    if not question.strip():
        raise ValueError("Question is required")
    if not chapters:
        return None

    outcome = await orchestrator.generate(
        build_request(question, chapters), configs, LECTURE_PICK_SHAPE
    )
    if isinstance(outcome, GenerationSuccess):
        index = outcome.records[0].index
        if 0 <= index < len(chapters):
            logger.info("Lecture finder selected: %s", chapters[index].title)
            return LectureMatch(
                chapter=chapters[index],
                source=MatchSource.MODEL,
                produced_by=outcome.produced_by.label,
            )
        logger.info("Lecture finder model returned no usable index (%d)", index)
    else:
        logger.info("Lecture finder models exhausted; using keyword search")

    chapter = match_by_keywords(question, chapters)
    if chapter is None:
        return None
    return LectureMatch(chapter=chapter, source=MatchSource.KEYWORD)
