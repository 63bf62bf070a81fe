"""Value types shared by the generation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from string import Template
from typing import Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


T = TypeVar("T", bound=BaseModel)


class Provider(str, Enum):
    GOOGLE = "google"
    OPENROUTER = "openrouter"


class ModelConfig(BaseModel):
    """One callable model variant; lists of these are ordered by preference."""

    model_config = ConfigDict(frozen=True)

    name: str
    api_version: str = "v1beta"
    provider: Provider = Provider.GOOGLE

    @property
    def label(self) -> str:
        return f"{self.provider.value}:{self.name}@{self.api_version}"


def parse_model_configs(raw: str) -> tuple[ModelConfig, ...]:
    """Parse ``"[provider:]name[@version], ..."`` into ordered configs.

    >>> [c.label for c in parse_model_configs("gemini-2.0-flash, openrouter:x-ai/grok@v1")]
    ['google:gemini-2.0-flash@v1beta', 'openrouter:x-ai/grok@v1']
    """
    configs: list[ModelConfig] = []
    for item in raw.split(","):
        entry = item.strip()
        if not entry:
            continue
        provider = Provider.GOOGLE
        head, sep, tail = entry.partition(":")
        if sep and head.lower() in {p.value for p in Provider}:
            provider = Provider(head.lower())
            entry = tail.strip()
        name, sep, version = entry.partition("@")
        data = {"name": name.strip(), "provider": provider}
        if sep and version.strip():
            data["api_version"] = version.strip()
        configs.append(ModelConfig(**data))
    return tuple(configs)


class GenerationRequest(BaseModel):
    """Caller intent: an instruction template plus its parameters.

    ``instruction`` uses ``string.Template`` placeholders (``$subject``,
    ``$topic``, ``$count`` and any key of ``params``) so prompts can embed
    literal JSON braces. Unknown ``$`` sequences such as ``$...$`` math
    markers are left untouched.
    """

    model_config = ConfigDict(frozen=True)

    instruction: str
    subject: str = ""
    topic: str = ""
    target_count: Optional[int] = Field(default=None, ge=1)
    avoid: tuple[str, ...] = ()
    params: dict[str, str] = Field(default_factory=dict)
    supplemental_instruction: Optional[str] = None
    is_supplemental: bool = False

    @field_validator("instruction")
    @classmethod
    def _instruction_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("instruction must not be empty")
        return v

    def render(self) -> str:
        template = self.instruction
        if self.is_supplemental and self.supplemental_instruction:
            template = self.supplemental_instruction
        values = dict(self.params)
        values.update(
            subject=self.subject,
            topic=self.topic,
            count="" if self.target_count is None else str(self.target_count),
        )
        text = Template(template).safe_substitute(values).strip()
        if self.avoid:
            text += "\n\nMake these DIFFERENT from: " + ", ".join(self.avoid)
        return text

    def supplemental(self, count: int, avoid: tuple[str, ...]) -> "GenerationRequest":
        return self.model_copy(
            update={
                "target_count": count,
                "avoid": tuple(avoid),
                "is_supplemental": True,
            }
        )


@dataclass(frozen=True)
class RawModelResponse:
    text: str
    config: ModelConfig


class AttemptStage(str, Enum):
    ENDPOINT = "endpoint"
    REPAIR = "repair"
    VALIDATION = "validation"
    UNEXPECTED = "unexpected"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class CandidateAttempt:
    """Diagnostics for one candidate; never shown to end users."""

    config: ModelConfig
    stage: AttemptStage
    detail: str = ""


class FailureReason(str, Enum):
    ALL_CANDIDATES_EXHAUSTED = "all_candidates_exhausted"


@dataclass(frozen=True)
class GenerationSuccess(Generic[T]):
    records: list[T]
    produced_by: ModelConfig
    rejected: int = 0
    attempts: tuple[CandidateAttempt, ...] = ()
    supplemental_used: bool = False
    under_yield: bool = False

    ok = True


@dataclass(frozen=True)
class GenerationFailure:
    reason: FailureReason = FailureReason.ALL_CANDIDATES_EXHAUSTED
    attempts: tuple[CandidateAttempt, ...] = field(default=())

    ok = False


GenerationOutcome = Union[GenerationSuccess[T], GenerationFailure]
