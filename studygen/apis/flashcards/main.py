from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from studygen.apis.deps import Controller, FlashcardConfigs
from studygen.core.config import settings
from studygen.core.logging import get_logger
from studygen.modules.flashcards.generator import generate_flashcards
from studygen.modules.generation.models import GenerationFailure
from .schemas import GenerateFlashcardsRequest, GenerateFlashcardsResponse

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    f"/{settings.app.version}/flashcards/generate",
    response_model=GenerateFlashcardsResponse,
    status_code=status.HTTP_200_OK,
    tags=["flashcards"],
)
async def create_flashcards(
    req: GenerateFlashcardsRequest,
    controller: Controller,
    configs: FlashcardConfigs,
) -> GenerateFlashcardsResponse:
    try:
        outcome = await generate_flashcards(
            controller, configs, req.subject, req.topic, req.count
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if isinstance(outcome, GenerationFailure):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not generate flashcards for this topic. Please try again.",
        )

    logger.info(
        "Generated %d flashcards for %s (%s)",
        len(outcome.records),
        req.topic,
        outcome.produced_by.label,
    )
    return GenerateFlashcardsResponse(
        cards=outcome.records, produced_by=outcome.produced_by.label
    )
