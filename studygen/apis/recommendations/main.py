from __future__ import annotations

from fastapi import APIRouter, status

from studygen.apis.deps import Orchestrator, RecommendationConfigs
from studygen.core.config import settings
from studygen.modules.recommendations.models.recommendations import ScoreReport
from studygen.modules.recommendations.recommender import recommend
from .schemas import RecommendationRequest, RecommendationResponse

router = APIRouter()


@router.post(
    f"/{settings.app.version}/test-recommendations",
    response_model=RecommendationResponse,
    status_code=status.HTTP_200_OK,
    tags=["recommendations"],
)
async def create_recommendations(
    req: RecommendationRequest,
    orchestrator: Orchestrator,
    configs: RecommendationConfigs,
) -> RecommendationResponse:
    report = ScoreReport(
        score=req.score,
        max_marks=req.max_marks,
        subject=req.subject,
        exam_type=req.exam_type,
        grade=req.grade,
    )
    result = await recommend(orchestrator, configs, report, req.chapters)
    return RecommendationResponse(
        recommendations=result.recommendations,
        source=result.source,
        produced_by=result.produced_by,
    )
