import pytest
from pydantic import ValidationError

from studygen.core.config import DEFAULT_MODELS, Feature, GenerationSettings
from studygen.modules.generation.models import (
    GenerationRequest,
    ModelConfig,
    Provider,
    parse_model_configs,
)


def test_parse_model_configs_keeps_order_and_defaults():
    configs = parse_model_configs(
        "gemini-2.0-flash, gemini-2.5-pro@v1 ,openrouter:x-ai/grok-code-fast-1,,"
    )

    assert configs == (
        ModelConfig(name="gemini-2.0-flash", api_version="v1beta"),
        ModelConfig(name="gemini-2.5-pro", api_version="v1"),
        ModelConfig(name="x-ai/grok-code-fast-1", provider=Provider.OPENROUTER),
    )


def test_default_candidates_are_cheapest_first():
    configs = parse_model_configs(DEFAULT_MODELS)

    assert [c.name for c in configs] == [
        "gemini-2.0-flash",
        "gemini-2.0-flash-lite",
        "gemini-2.5-flash",
        "gemini-2.5-pro",
    ]


def test_generation_settings_read_the_environment(monkeypatch):
    monkeypatch.setenv("GENERATION_MODELS", "gemini-2.5-flash")
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "12.5")

    gen = GenerationSettings()

    assert gen.timeout_seconds == 12.5
    assert [c.label for c in gen.candidates()] == ["google:gemini-2.5-flash@v1beta"]


def test_feature_candidates_fall_back_to_the_shared_list(monkeypatch):
    monkeypatch.setenv("GENERATION_MODELS", "gemini-2.5-flash")
    monkeypatch.setenv("EXPLAIN_IT_MODELS", "openrouter:x-ai/grok-code-fast-1,gemini-2.5-pro")
    monkeypatch.delenv("FLASHCARDS_MODELS", raising=False)
    monkeypatch.delenv("LECTURE_FINDER_MODELS", raising=False)

    gen = GenerationSettings()

    assert [c.name for c in gen.candidates(Feature.FLASHCARDS)] == ["gemini-2.5-flash"]
    assert [c.name for c in gen.candidates(Feature.EXPLAIN_IT)] == [
        "x-ai/grok-code-fast-1",
        "gemini-2.5-pro",
    ]
    assert [c.name for c in gen.candidates(Feature.LECTURE_FINDER)] == [
        "gemini-2.0-flash-lite",
        "gemini-2.5-flash-lite",
        "gemini-2.0-flash",
    ]


def test_model_config_is_immutable():
    config = ModelConfig(name="gemini-2.0-flash")

    with pytest.raises(ValidationError):
        config.name = "other"


def test_render_substitutes_known_placeholders_only():
    request = GenerationRequest(
        instruction='Make $count cards on "$topic" ($subject). Use $...$ and {"q": "$E=mc^2$"} for $audience.',
        subject="Physics",
        topic="Energy",
        target_count=3,
        params={"audience": "class 11"},
    )

    assert request.render() == (
        'Make 3 cards on "Energy" (Physics). Use $...$ and {"q": "$E=mc^2$"} for class 11.'
    )


def test_supplemental_request_uses_its_own_template():
    request = GenerationRequest(
        instruction="Generate $count cards.",
        supplemental_instruction="Generate $count MORE cards.",
        target_count=10,
    )

    extra = request.supplemental(4, ("Q1", "Q2"))

    assert request.render() == "Generate 10 cards."
    assert extra.render() == "Generate 4 MORE cards.\n\nMake these DIFFERENT from: Q1, Q2"
    assert request.is_supplemental is False


@pytest.mark.parametrize("instruction", ["", "   \n"])
def test_blank_instruction_is_rejected(instruction):
    with pytest.raises(ValidationError):
        GenerationRequest(instruction=instruction)
