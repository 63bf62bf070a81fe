"""Top up under-yielding generations with a single supplemental round."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence, TypeVar

from pydantic import BaseModel

from studygen.core.logging import get_logger
from studygen.modules.generation.models import (
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    GenerationSuccess,
    ModelConfig,
)
from studygen.modules.generation.orchestrator import FallbackOrchestrator
from studygen.modules.generation.shapes import RecordShape

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

SEED_SAMPLE_SIZE = 3
SEED_SNIPPET_CHARS = 30


class YieldCompletionController:
    """Runs the orchestrator and asks once for the missing items.

    At most two orchestrator rounds run, strictly one after the other, so a
    call makes at most ``2 * len(configs)`` endpoint requests.
    """

    def __init__(self, orchestrator: FallbackOrchestrator) -> None:
        self.orchestrator = orchestrator

    async def generate_with_target(
        self,
        request: GenerationRequest,
        configs: Sequence[ModelConfig],
        shape: RecordShape[T],
        target_count: int,
        min_acceptable: int,
    ) -> GenerationOutcome[T]:
        if target_count < 1:
            raise ValueError("target_count must be at least 1")
        if not 0 <= min_acceptable <= target_count:
            raise ValueError("min_acceptable must be between 0 and target_count")

        if request.target_count != target_count:
            request = request.model_copy(update={"target_count": target_count})

        first = await self.orchestrator.generate(request, configs, shape)
        if isinstance(first, GenerationFailure):
            return first

        records = list(first.records)
        if len(records) >= target_count:
            return replace(first, records=records[:target_count])

        missing = target_count - len(records)
        seed = tuple(
            shape.identify(r)[:SEED_SNIPPET_CHARS] for r in records[:SEED_SAMPLE_SIZE]
        )
        logger.info(
            "[%s] Only got %d of %d record(s); requesting %d more",
            shape.name,
            len(records),
            target_count,
            missing,
        )
        extra = await self.orchestrator.generate(
            request.supplemental(missing, tuple(s for s in seed if s)), configs, shape
        )

        attempts = first.attempts
        rejected = first.rejected
        if isinstance(extra, GenerationSuccess):
            records = (records + list(extra.records))[:target_count]
            attempts += extra.attempts
            rejected += extra.rejected
        else:
            attempts += extra.attempts
            logger.warning(
                "[%s] Supplemental round failed; keeping %d record(s)",
                shape.name,
                len(records),
            )

        under_yield = len(records) < min_acceptable
        if under_yield:
            logger.warning(
                "[%s] Returning %d record(s), below the acceptable minimum of %d",
                shape.name,
                len(records),
                min_acceptable,
            )
        return replace(
            first,
            records=records,
            rejected=rejected,
            attempts=attempts,
            supplemental_used=True,
            under_yield=under_yield,
        )
