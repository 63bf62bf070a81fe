"""Lecture finder exports."""

from .models.lectures import ChapterInfo, LectureMatch, MatchSource
from .finder import find_lecture, match_by_keywords

__all__ = [
    "ChapterInfo",
    "LectureMatch",
    "MatchSource",
    "find_lecture",
    "match_by_keywords",
]
