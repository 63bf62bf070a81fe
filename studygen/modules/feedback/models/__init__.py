from .feedback import (
    FEEDBACK_SHAPE,
    ExplanationAttempt,
    Feedback,
    FeedbackDraft,
    LectureRef,
    NextSteps,
)

__all__ = [
    "FEEDBACK_SHAPE",
    "ExplanationAttempt",
    "Feedback",
    "FeedbackDraft",
    "LectureRef",
    "NextSteps",
]
