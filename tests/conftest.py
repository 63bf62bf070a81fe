from __future__ import annotations

import json
from collections import defaultdict
from typing import Callable, Iterable, Union

import pytest

from studygen.modules.generation.models import (
    GenerationRequest,
    ModelConfig,
    RawModelResponse,
)

Step = Union[str, BaseException, Callable[[GenerationRequest], str]]


class ScriptedClient:
    """Endpoint client double that replays canned replies per model name.

    Each config has its own queue; a queued exception is raised, a callable
    is invoked with the request. Every call is recorded.
    """

    def __init__(self, script: dict[str, Iterable[Step]] | None = None) -> None:
        self.script: dict[str, list[Step]] = defaultdict(list)
        for name, steps in (script or {}).items():
            self.script[name].extend(steps)
        self.calls: list[tuple[ModelConfig, GenerationRequest, float]] = []

    async def call(
        self, config: ModelConfig, request: GenerationRequest, timeout: float
    ) -> RawModelResponse:
        self.calls.append((config, request, timeout))
        queue = self.script[config.name]
        if not queue:
            raise AssertionError(f"unexpected call to {config.name}")
        step = queue.pop(0)
        if isinstance(step, BaseException):
            raise step
        if callable(step):
            step = step(request)
        return RawModelResponse(text=step, config=config)

    @property
    def called_models(self) -> list[str]:
        return [c.name for c, _, _ in self.calls]


def cards_json(*pairs: tuple[str, str]) -> str:
    return json.dumps([{"question": q, "hint": None, "answer": a} for q, a in pairs])


def numbered_cards(start: int, count: int) -> str:
    return cards_json(*[(f"Q{i}", f"A{i}") for i in range(start, start + count)])


@pytest.fixture
def configs() -> tuple[ModelConfig, ...]:
    return (
        ModelConfig(name="model-a"),
        ModelConfig(name="model-b"),
        ModelConfig(name="model-c"),
    )


@pytest.fixture
def gen_request() -> GenerationRequest:
    return GenerationRequest(
        instruction="Generate $count cards about $topic in $subject.",
        subject="Physics",
        topic="Optics",
    )
