import asyncio

import httpx
import pytest

from conftest import ScriptedClient, cards_json
from studygen.modules.flashcards.models.flashcards import FLASHCARD_SHAPE, Flashcard
from studygen.modules.generation.client import HttpEndpointClient
from studygen.modules.generation.completion import YieldCompletionController
from studygen.modules.generation.errors import (
    EmptyBody,
    TransportError,
    UpstreamStatusError,
)
from studygen.modules.generation.models import (
    AttemptStage,
    FailureReason,
    GenerationFailure,
    GenerationSuccess,
    ModelConfig,
)
from studygen.modules.generation import orchestrator as orchestrator_module
from studygen.modules.generation.orchestrator import FallbackOrchestrator

PROSE = "Here are some thoughts about optics, but no structured data."


@pytest.mark.parametrize("winner", [1, 2, 3])
async def test_stops_at_first_validated_success(configs, gen_request, winner):
    script = {c.name: [UpstreamStatusError(500)] for c in configs[: winner - 1]}
    script[configs[winner - 1].name] = [cards_json(("Q1", "A1"))]
    for later in configs[winner:]:
        script[later.name] = [cards_json(("unused", "unused"))]
    client = ScriptedClient(script)

    outcome = await FallbackOrchestrator(client).generate(
        gen_request, configs, FLASHCARD_SHAPE
    )

    assert isinstance(outcome, GenerationSuccess)
    assert outcome.produced_by == configs[winner - 1]
    assert len(client.calls) == winner
    assert outcome.attempts[-1].stage is AttemptStage.SUCCEEDED


async def test_every_failure_kind_advances_to_the_next_candidate(gen_request):
    configs = tuple(ModelConfig(name=f"m{i}") for i in range(6))
    client = ScriptedClient(
        {
            "m0": [TransportError("connect timeout")],
            "m1": [EmptyBody("no text")],
            "m2": [PROSE],
            "m3": ['[{"question": "", "answer": "A"}]'],
            "m4": [RuntimeError("sdk bug")],
            "m5": ['[{"question": "Q", "answer": "A"}]'],
        }
    )

    outcome = await FallbackOrchestrator(client, timeout=7).generate(
        gen_request, configs, FLASHCARD_SHAPE
    )

    assert isinstance(outcome, GenerationSuccess)
    assert outcome.records == [Flashcard(question="Q", answer="A")]
    assert [a.stage for a in outcome.attempts] == [
        AttemptStage.ENDPOINT,
        AttemptStage.ENDPOINT,
        AttemptStage.REPAIR,
        AttemptStage.VALIDATION,
        AttemptStage.UNEXPECTED,
        AttemptStage.SUCCEEDED,
    ]
    assert {timeout for _, _, timeout in client.calls} == {7}


async def test_exhaustion_returns_a_failure_value(configs, gen_request):
    client = ScriptedClient({c.name: [PROSE] for c in configs})

    outcome = await FallbackOrchestrator(client).generate(
        gen_request, configs, FLASHCARD_SHAPE
    )

    assert isinstance(outcome, GenerationFailure)
    assert outcome.reason is FailureReason.ALL_CANDIDATES_EXHAUSTED
    assert client.called_models == ["model-a", "model-b", "model-c"]
    assert all(a.stage is AttemptStage.REPAIR for a in outcome.attempts)


async def test_empty_candidate_list_fails_without_calls(gen_request):
    client = ScriptedClient()

    outcome = await FallbackOrchestrator(client).generate(gen_request, (), FLASHCARD_SHAPE)

    assert isinstance(outcome, GenerationFailure)
    assert client.calls == []


async def test_partial_rejects_still_succeed(configs, gen_request):
    text = '[{"question": "Q1", "answer": "A1"}, {"question": "Q2"}, 5]'
    client = ScriptedClient({"model-a": [text]})

    outcome = await FallbackOrchestrator(client).generate(
        gen_request, configs, FLASHCARD_SHAPE
    )

    assert outcome.records == [Flashcard(question="Q1", answer="A1")]
    assert outcome.rejected == 2


async def test_deeply_nested_output_moves_on_to_the_next_candidate(configs, gen_request):
    nested = "[" * 100_000 + "]" * 100_000
    client = ScriptedClient(
        {"model-a": [nested], "model-b": [cards_json(("Q1", "A1"))]}
    )

    outcome = await FallbackOrchestrator(client).generate(
        gen_request, configs, FLASHCARD_SHAPE
    )

    assert isinstance(outcome, GenerationSuccess)
    assert outcome.produced_by == configs[1]
    assert outcome.attempts[0].stage is AttemptStage.REPAIR


async def test_validation_crash_is_recorded_and_skipped(configs, gen_request, monkeypatch):
    real_validate = orchestrator_module.validate
    calls = []

    def flaky_validate(value, shape):
        calls.append(value)
        if len(calls) == 1:
            raise RecursionError("too deep")
        return real_validate(value, shape)

    monkeypatch.setattr(orchestrator_module, "validate", flaky_validate)
    client = ScriptedClient(
        {
            "model-a": [cards_json(("Q1", "A1"))],
            "model-b": [cards_json(("Q2", "A2"))],
        }
    )

    outcome = await FallbackOrchestrator(client).generate(
        gen_request, configs, FLASHCARD_SHAPE
    )

    assert outcome.records == [Flashcard(question="Q2", answer="A2")]
    assert outcome.attempts[0].stage is AttemptStage.UNEXPECTED
    assert "RecursionError" in outcome.attempts[0].detail


async def test_cancellation_is_not_swallowed(configs, gen_request):
    client = ScriptedClient({"model-a": [asyncio.CancelledError()]})

    with pytest.raises(asyncio.CancelledError):
        await FallbackOrchestrator(client).generate(gen_request, configs, FLASHCARD_SHAPE)

    assert len(client.calls) == 1


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        FallbackOrchestrator(ScriptedClient(), timeout=0)


async def test_http_500_then_valid_json_end_to_end(gen_request):
    configs = (ModelConfig(name="gemini-2.0-flash"), ModelConfig(name="gemini-2.5-flash"))
    hits = []

    def handler(request: httpx.Request) -> httpx.Response:
        hits.append(request.url.path)
        if "gemini-2.0-flash" in request.url.path:
            return httpx.Response(500, text="internal error")
        body = cards_json(("Q1", "A1"), ("Q2", "A2"))
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": body}]}}]}
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = HttpEndpointClient(http, gemini_api_key="k")
        controller = YieldCompletionController(FallbackOrchestrator(client, timeout=5))
        outcome = await controller.generate_with_target(
            gen_request, configs, FLASHCARD_SHAPE, target_count=2, min_acceptable=2
        )

    assert isinstance(outcome, GenerationSuccess)
    assert outcome.produced_by == configs[1]
    assert [c.question for c in outcome.records] == ["Q1", "Q2"]
    assert len(hits) == 2
    assert outcome.supplemental_used is False
