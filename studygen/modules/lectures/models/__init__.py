from .lectures import (
    LECTURE_PICK_SHAPE,
    ChapterInfo,
    LectureMatch,
    LecturePick,
    MatchSource,
)

__all__ = [
    "LECTURE_PICK_SHAPE",
    "ChapterInfo",
    "LectureMatch",
    "LecturePick",
    "MatchSource",
]
