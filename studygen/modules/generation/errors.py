"""Error taxonomy for the generation pipeline.

Endpoint and repair errors are raised per candidate and recovered by the
orchestrator, which moves on to the next model configuration. Callers only
ever see a ``GenerationFailure`` outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studygen.modules.generation.models import ModelConfig
    from studygen.modules.generation.repair import RepairPass


class GenerationError(Exception):
    """Base class for all pipeline errors."""


class EndpointError(GenerationError):
    """A model endpoint was unreachable or returned nothing usable."""

    def __init__(self, message: str, *, config: "ModelConfig | None" = None) -> None:
        super().__init__(message)
        self.config = config


class TransportError(EndpointError):
    """Network failure or timeout before a response arrived."""


class UpstreamStatusError(EndpointError):
    """The provider answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        body: str = "",
        *,
        config: "ModelConfig | None" = None,
    ) -> None:
        snippet = body.strip().replace("\n", " ")[:200]
        super().__init__(f"HTTP {status_code}: {snippet}", config=config)
        self.status_code = status_code
        self.body = snippet


class EmptyBody(EndpointError):
    """2xx response without any generated text."""


class MissingCredentials(EndpointError):
    """No API key is configured for the candidate's provider."""


class RepairError(GenerationError):
    """Model output could not be turned into structured data."""

    def __init__(self, message: str, attempts: "tuple[RepairPass, ...]" = ()) -> None:
        super().__init__(message)
        self.attempts = attempts


class NoJsonFound(RepairError):
    """The text does not contain a single array or object bracket."""


class MalformedAfterAllPasses(RepairError):
    """Brackets were found but no repair pass produced parseable structure."""
