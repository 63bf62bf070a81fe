"""Explanation feedback exports."""

from .models.feedback import ExplanationAttempt, Feedback, LectureRef
from .analyzer import FeedbackUnavailable, analyze_explanation, relevant_lectures

__all__ = [
    "ExplanationAttempt",
    "Feedback",
    "FeedbackUnavailable",
    "LectureRef",
    "analyze_explanation",
    "relevant_lectures",
]
