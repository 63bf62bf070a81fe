"""Try model configurations in order until one yields validated records."""

from __future__ import annotations

from typing import Sequence, TypeVar

from pydantic import BaseModel

from studygen.core.logging import candidate_context, get_logger
from studygen.modules.generation.client import EndpointClient
from studygen.modules.generation.errors import EndpointError, RepairError
from studygen.modules.generation.models import (
    AttemptStage,
    CandidateAttempt,
    FailureReason,
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    GenerationSuccess,
    ModelConfig,
)
from studygen.modules.generation.repair import extract_structure
from studygen.modules.generation.shapes import RecordShape
from studygen.modules.generation.validator import validate

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_TIMEOUT_SECONDS = 30.0


class FallbackOrchestrator:
    """Walks the candidate list sequentially; the first validated success wins.

    Each candidate is tried at most once and there is no delay between
    candidates, so a call makes at most ``len(configs)`` endpoint requests.
    Upstream failures never escape: exhaustion is returned as a
    ``GenerationFailure``.
    """

    def __init__(
        self, client: EndpointClient, *, timeout: float = DEFAULT_TIMEOUT_SECONDS
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.client = client
        self.timeout = timeout

    async def generate(
        self,
        request: GenerationRequest,
        configs: Sequence[ModelConfig],
        shape: RecordShape[T],
    ) -> GenerationOutcome[T]:
        attempts: list[CandidateAttempt] = []

        def _record(config: ModelConfig, stage: AttemptStage, detail: str) -> None:
            attempts.append(CandidateAttempt(config=config, stage=stage, detail=detail))

        for position, config in enumerate(configs, start=1):
            with candidate_context(config.label):
                logger.info(
                    "[%s] Trying %s (%d/%d)", shape.name, config.label, position, len(configs)
                )
                try:
                    raw = await self.client.call(config, request, self.timeout)
                except EndpointError as e:
                    logger.warning("[%s] %s endpoint error: %s", shape.name, config.label, e)
                    _record(config, AttemptStage.ENDPOINT, f"{type(e).__name__}: {e}")
                    continue
                except Exception as e:  # noqa: BLE001
                    logger.exception("[%s] %s unexpected failure", shape.name, config.label)
                    _record(config, AttemptStage.UNEXPECTED, f"{type(e).__name__}: {e}")
                    continue

                logger.debug("[%s] raw response head: %s", shape.name, raw.text[:300])

                try:
                    repaired = extract_structure(raw.text, shape.salvage_keys)
                except RepairError as e:
                    logger.warning(
                        "[%s] %s output unusable: %s", shape.name, config.label, e
                    )
                    _record(config, AttemptStage.REPAIR, f"{type(e).__name__}: {e}")
                    continue
                except Exception as e:  # noqa: BLE001
                    logger.exception("[%s] %s repair crashed", shape.name, config.label)
                    _record(config, AttemptStage.UNEXPECTED, f"{type(e).__name__}: {e}")
                    continue

                try:
                    result = validate(repaired.value, shape)
                except Exception as e:  # noqa: BLE001
                    logger.exception(
                        "[%s] %s validation crashed", shape.name, config.label
                    )
                    _record(config, AttemptStage.UNEXPECTED, f"{type(e).__name__}: {e}")
                    continue
                if not result.accepted:
                    logger.warning(
                        "[%s] %s produced no valid records (%d rejected)",
                        shape.name,
                        config.label,
                        result.rejected,
                    )
                    _record(
                        config, AttemptStage.VALIDATION, f"0 accepted, {result.rejected} rejected"
                    )
                    continue

                if result.rejected:
                    logger.info(
                        "[%s] %s: dropped %d malformed record(s)",
                        shape.name,
                        config.label,
                        result.rejected,
                    )
                logger.info(
                    "[%s] Success with %s: %d record(s) via %s",
                    shape.name,
                    config.label,
                    len(result.accepted),
                    repaired.repair_pass.value,
                )
                _record(config, AttemptStage.SUCCEEDED, repaired.repair_pass.value)
                return GenerationSuccess(
                    records=result.accepted,
                    produced_by=config,
                    rejected=result.rejected,
                    attempts=tuple(attempts),
                )

        logger.error("[%s] All %d candidate model(s) failed", shape.name, len(configs))
        return GenerationFailure(
            reason=FailureReason.ALL_CANDIDATES_EXHAUSTED, attempts=tuple(attempts)
        )
