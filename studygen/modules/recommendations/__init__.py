"""Post-test recommendation exports."""

from .models.recommendations import (
    RECOMMENDATION_SHAPE,
    ChapterResources,
    Recommendation,
    RecommendationSet,
    RecommendationSource,
    Resource,
    ResourceType,
    ScoreReport,
)
from .recommender import fallback_recommendations, performance_level, recommend

__all__ = [
    "RECOMMENDATION_SHAPE",
    "ChapterResources",
    "Recommendation",
    "RecommendationSet",
    "RecommendationSource",
    "Resource",
    "ResourceType",
    "ScoreReport",
    "fallback_recommendations",
    "performance_level",
    "recommend",
]
