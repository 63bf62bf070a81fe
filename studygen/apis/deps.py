from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from studygen.core.config import Feature, settings
from studygen.modules.generation.client import EndpointClient
from studygen.modules.generation.completion import YieldCompletionController
from studygen.modules.generation.models import ModelConfig
from studygen.modules.generation.orchestrator import FallbackOrchestrator


def get_endpoint_client(request: Request) -> EndpointClient:
    """Endpoint client created in the application lifespan."""
    client = getattr(request.app.state, "endpoint_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI service not configured.",
        )
    return client


def get_flashcard_configs() -> tuple[ModelConfig, ...]:
    return settings.generation.candidates(Feature.FLASHCARDS)


def get_recommendation_configs() -> tuple[ModelConfig, ...]:
    return settings.generation.candidates(Feature.RECOMMENDATIONS)


def get_explain_it_configs() -> tuple[ModelConfig, ...]:
    return settings.generation.candidates(Feature.EXPLAIN_IT)


def get_lecture_finder_configs() -> tuple[ModelConfig, ...]:
    return settings.generation.candidates(Feature.LECTURE_FINDER)


def get_orchestrator(
    client: Annotated[EndpointClient, Depends(get_endpoint_client)],
) -> FallbackOrchestrator:
    return FallbackOrchestrator(client, timeout=settings.generation.timeout_seconds)


def get_controller(
    orchestrator: Annotated[FallbackOrchestrator, Depends(get_orchestrator)],
) -> YieldCompletionController:
    return YieldCompletionController(orchestrator)


FlashcardConfigs = Annotated[
    tuple[ModelConfig, ...], Depends(get_flashcard_configs)
]
RecommendationConfigs = Annotated[
    tuple[ModelConfig, ...], Depends(get_recommendation_configs)
]
ExplainItConfigs = Annotated[
    tuple[ModelConfig, ...], Depends(get_explain_it_configs)
]
LectureFinderConfigs = Annotated[
    tuple[ModelConfig, ...], Depends(get_lecture_finder_configs)
]
Orchestrator = Annotated[FallbackOrchestrator, Depends(get_orchestrator)]
Controller = Annotated[YieldCompletionController, Depends(get_controller)]
