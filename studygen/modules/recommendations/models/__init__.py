from .recommendations import (
    RECOMMENDATION_SHAPE,
    RESOURCE_SHAPE,
    ChapterResources,
    Recommendation,
    RecommendationSet,
    RecommendationSource,
    Resource,
    ResourceType,
    ScoreReport,
)

__all__ = [
    "RECOMMENDATION_SHAPE",
    "RESOURCE_SHAPE",
    "ChapterResources",
    "Recommendation",
    "RecommendationSet",
    "RecommendationSource",
    "Resource",
    "ResourceType",
    "ScoreReport",
]
