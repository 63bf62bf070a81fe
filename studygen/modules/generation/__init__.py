"""Generative content pipeline: endpoint fallback, JSON repair, validation."""

from .client import EndpointClient, HttpEndpointClient
from .completion import YieldCompletionController
from .errors import (
    EmptyBody,
    EndpointError,
    GenerationError,
    MalformedAfterAllPasses,
    MissingCredentials,
    NoJsonFound,
    RepairError,
    TransportError,
    UpstreamStatusError,
)
from .models import (
    CandidateAttempt,
    FailureReason,
    GenerationFailure,
    GenerationOutcome,
    GenerationRequest,
    GenerationSuccess,
    ModelConfig,
    Provider,
    RawModelResponse,
    parse_model_configs,
)
from .orchestrator import FallbackOrchestrator
from .repair import RepairPass, RepairResult, extract_structure
from .shapes import FieldKind, FieldSpec, RecordShape
from .validator import ValidationResult, validate

__all__ = [
    "CandidateAttempt",
    "EmptyBody",
    "EndpointClient",
    "EndpointError",
    "FailureReason",
    "FallbackOrchestrator",
    "FieldKind",
    "FieldSpec",
    "GenerationError",
    "GenerationFailure",
    "GenerationOutcome",
    "GenerationRequest",
    "GenerationSuccess",
    "HttpEndpointClient",
    "MalformedAfterAllPasses",
    "MissingCredentials",
    "ModelConfig",
    "NoJsonFound",
    "Provider",
    "RawModelResponse",
    "RecordShape",
    "RepairError",
    "RepairPass",
    "RepairResult",
    "TransportError",
    "UpstreamStatusError",
    "ValidationResult",
    "YieldCompletionController",
    "extract_structure",
    "parse_model_configs",
    "validate",
]
