import json

import pytest

from conftest import ScriptedClient
from studygen.modules.feedback.analyzer import (
    FeedbackUnavailable,
    analyze_explanation,
    build_request,
    relevant_lectures,
)
from studygen.modules.feedback.models.feedback import ExplanationAttempt, LectureRef
from studygen.modules.generation.orchestrator import FallbackOrchestrator

LECTURES = [
    LectureRef(title="Newton's Laws", url="/lectures/jee/physics/1/newton", subject="Physics", unit_title="Mechanics"),
    LectureRef(title="Chemical Bonding", url="/lectures/jee/chemistry/2/bonding", subject="Chemistry"),
    LectureRef(title="Friction", url="/lectures/jee/physics/1/friction", subject="Physics", unit_title="Mechanics"),
]

ATTEMPT = ExplanationAttempt(
    subject="Physics",
    prompt="Explain Newton's third law",
    explanation="Every force has an equal force in the same direction on the same body.",
    key_concepts=["action", "reaction"],
    student_name="Riya",
)


def reply(**overrides):
    body = {
        "correct": "You remembered that forces come in pairs.",
        "missing": "The pair acts on different bodies, in opposite directions.",
        "needsLecture": True,
        "nextSteps": {"text": "Rewatch the basics.", "lectureIndex": 1},
    }
    body.update(overrides)
    return json.dumps(body)


def test_lectures_are_filtered_by_subject():
    assert [lec.title for lec in relevant_lectures(LECTURES, "physics")] == [
        "Newton's Laws",
        "Friction",
    ]


def test_prompt_addresses_the_student_and_lists_lectures():
    prompt = build_request(ATTEMPT, relevant_lectures(LECTURES, "Physics")).render()

    assert "giving personal feedback to a student named Riya." in prompt
    assert "Key concepts: action, reaction" in prompt
    assert "0. Newton's Laws (Mechanics)\n1. Friction (Mechanics)" in prompt


async def test_lecture_is_suggested_only_when_needed(configs):
    client = ScriptedClient({"model-a": [reply()]})

    feedback = await analyze_explanation(FallbackOrchestrator(client), configs, ATTEMPT, LECTURES)

    assert feedback.lecture.title == "Friction"
    assert feedback.next_step == "Rewatch the basics."
    assert feedback.produced_by == "google:model-a@v1beta"


@pytest.mark.parametrize(
    "overrides",
    [
        {"needsLecture": False},
        {"nextSteps": {"text": "Try again", "lectureIndex": 9}},
        {"nextSteps": {"text": "Try again", "lectureIndex": None}},
    ],
)
async def test_no_lecture_without_a_valid_request(configs, overrides):
    client = ScriptedClient({"model-a": [reply(**overrides)]})

    feedback = await analyze_explanation(FallbackOrchestrator(client), configs, ATTEMPT, LECTURES)

    assert feedback.lecture is None


async def test_missing_next_steps_gets_a_default_tip(configs):
    body = json.dumps({"correct": "Good start.", "missing": "Directions."})
    client = ScriptedClient({"model-a": ["```json\n" + body + "\n```"]})

    feedback = await analyze_explanation(FallbackOrchestrator(client), configs, ATTEMPT)

    assert feedback.next_step == "Keep practicing!"
    assert feedback.lecture is None


async def test_incomplete_feedback_falls_through_to_next_model(configs):
    client = ScriptedClient(
        {
            "model-a": [json.dumps({"correct": "Only half."})],
            "model-b": [reply(needsLecture=False)],
        }
    )

    feedback = await analyze_explanation(FallbackOrchestrator(client), configs, ATTEMPT, LECTURES)

    assert feedback.produced_by == "google:model-b@v1beta"
    assert client.called_models == ["model-a", "model-b"]


async def test_exhaustion_raises_feedback_unavailable(configs):
    client = ScriptedClient({c.name: ["I can't grade this."] for c in configs})

    with pytest.raises(FeedbackUnavailable) as exc:
        await analyze_explanation(FallbackOrchestrator(client), configs, ATTEMPT)

    assert len(exc.value.failure.attempts) == len(configs)


async def test_short_explanation_is_rejected_before_any_call(configs):
    client = ScriptedClient()
    attempt = ATTEMPT.model_copy(update={"explanation": "  idk   "})

    with pytest.raises(ValueError):
        await analyze_explanation(FallbackOrchestrator(client), configs, attempt)
    assert client.calls == []


def test_lectures_without_a_subject_are_not_offered():
    lectures = [
        LectureRef(title="Orientation", url="/lectures/welcome"),
        LectureRef(title="Friction", url="/lectures/friction", subject="Physics"),
    ]

    assert [lec.title for lec in relevant_lectures(lectures, "Physics")] == ["Friction"]
