from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from studygen.apis.deps import ExplainItConfigs, Orchestrator
from studygen.core.config import settings
from studygen.modules.feedback.analyzer import FeedbackUnavailable, analyze_explanation
from studygen.modules.feedback.models.feedback import ExplanationAttempt
from .schemas import AnalyzeRequest, AnalyzeResponse, NextStepsOut

router = APIRouter()


@router.post(
    f"/{settings.app.version}/explain-it/analyze",
    response_model=AnalyzeResponse,
    status_code=status.HTTP_200_OK,
    tags=["explain-it"],
)
async def analyze(
    req: AnalyzeRequest,
    orchestrator: Orchestrator,
    configs: ExplainItConfigs,
) -> AnalyzeResponse:
    attempt = ExplanationAttempt(
        subject=req.subject,
        prompt=req.prompt,
        explanation=req.explanation,
        key_concepts=req.key_concepts,
        student_name=req.student_name,
    )
    try:
        feedback = await analyze_explanation(orchestrator, configs, attempt, req.lectures)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except FeedbackUnavailable:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to analyze. Please try again.",
        )

    lecture = feedback.lecture
    return AnalyzeResponse(
        correct=feedback.correct,
        missing=feedback.missing,
        next_steps=NextStepsOut(
            text=feedback.next_step,
            lecture_slug=lecture.url if lecture else None,
            lecture_title=lecture.title if lecture else None,
        ),
    )
