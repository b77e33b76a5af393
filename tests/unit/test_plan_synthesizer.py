import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from sp.errors import ValidationError
from sp.models import Difficulty, PlanSource
from sp.schemas.study_plans import PlanGenerateRequest
from sp.services.plan_synthesizer import PlanRequest, PlanSynthesizer, synthesize_plan


def rust_request() -> PlanRequest:
    return PlanRequest(
        topic="Rust", daily_hours=3, difficulty=Difficulty.advanced, duration=12
    )


def test_synthesis_is_deterministic() -> None:
    first = synthesize_plan(rust_request())
    second = synthesize_plan(rust_request())

    assert first.model_dump_json() == second.model_dump_json()
    assert first.estimated_hours == 252
    assert first.title == "Study Plan for Rust"
    assert first.duration == "12 Weeks"
    assert first.steps == [
        "Week 1-3: Foundation - Learn the core terminology and fundamentals "
        "of Rust and set up your study environment",
        "Week 4-6: Core Learning - Work through the essential concepts of "
        "Rust with guided exercises and regular practice",
        "Week 7-9: Advanced Topics - Explore advanced Rust techniques and "
        "apply them to larger, realistic problems",
        "Week 10-12: Mastery - Build a capstone project with Rust, review "
        "weak areas and consolidate what you have learned",
    ]
    assert "advanced" in first.description


@pytest.mark.parametrize(
    "duration,expected_prefixes",
    [
        (8, ["Week 1-2:", "Week 3-4:", "Week 5-6:", "Week 7-8:"]),
        (10, ["Week 1-3:", "Week 4-6:", "Week 7-9:", "Week 10-10:"]),
        (4, ["Week 1-1:", "Week 2-2:", "Week 3-3:", "Week 4-4:"]),
    ],
)
def test_final_phase_ends_at_duration(duration, expected_prefixes) -> None:
    plan = synthesize_plan(PlanRequest(topic="Go", duration=duration))

    assert len(plan.steps) == 4
    for step, prefix in zip(plan.steps, expected_prefixes):
        assert step.startswith(prefix)


def test_phase_names_in_order() -> None:
    plan = synthesize_plan(PlanRequest(topic="SQL"))
    names = [step.split(": ", 1)[1].split(" - ", 1)[0] for step in plan.steps]
    assert names == ["Foundation", "Core Learning", "Advanced Topics", "Mastery"]


def test_request_defaults_and_trimming() -> None:
    request = PlanRequest.from_payload(
        PlanGenerateRequest(topic="  Linear Algebra  ", difficulty="expert")
    )

    assert request.topic == "Linear Algebra"
    assert request.difficulty is Difficulty.intermediate
    assert request.daily_hours == 2
    assert request.duration == 8


@pytest.mark.parametrize("topic", ["", "   "])
def test_empty_topic_rejected(topic) -> None:
    with pytest.raises(ValidationError):
        PlanRequest.from_payload(PlanGenerateRequest(topic=topic))


@pytest.mark.asyncio
async def test_generate_without_client_uses_templates() -> None:
    result = await PlanSynthesizer(client=None).generate(rust_request())

    assert result.source is PlanSource.smart_mock
    assert result.content == synthesize_plan(rust_request())


@pytest.mark.asyncio
async def test_generate_uses_llm_response(mock_llm_client) -> None:
    result = await PlanSynthesizer(client=mock_llm_client).generate(rust_request())

    assert result.source is PlanSource.openai
    assert result.content.title == "Rust in 12 Weeks"
    assert result.content.estimated_hours == 252
    assert result.content.steps[0] == "Week 1-3: Ownership"

    prompt = mock_llm_client.complete_json.await_args.args[0]
    assert "Rust" in prompt
    assert "advanced" in prompt
    assert "12 weeks" in prompt


@pytest.mark.asyncio
async def test_llm_response_defaults_applied() -> None:
    client = AsyncMock()
    client.complete_json.return_value = json.dumps(
        {"steps": ["Read the book", "Build a CLI"], "estimatedHours": "40"}
    )

    result = await PlanSynthesizer(client=client).generate(
        PlanRequest(topic="Rust")
    )

    assert result.source is PlanSource.openai
    assert result.content.title == "Study Plan for Rust"
    assert result.content.duration == "8 Weeks"
    assert result.content.description is None
    assert result.content.estimated_hours == 40.0
    assert result.content.steps == ["Read the book", "Build a CLI"]


@pytest.mark.asyncio
async def test_llm_non_numeric_hours_replaced_by_total() -> None:
    client = AsyncMock()
    client.complete_json.return_value = json.dumps(
        {"title": "T", "steps": ["one"], "estimatedHours": "lots"}
    )

    result = await PlanSynthesizer(client=client).generate(rust_request())

    assert result.content.estimated_hours == 252


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "side_effect",
    [
        httpx.ConnectError("connection refused"),
        RuntimeError("boom"),
        KeyError("choices"),
    ],
)
async def test_llm_failure_falls_back(side_effect) -> None:
    client = AsyncMock()
    client.complete_json.side_effect = side_effect

    result = await PlanSynthesizer(client=client).generate(rust_request())

    assert result.source is PlanSource.smart_mock
    assert len(result.content.steps) == 4
    assert result.content.estimated_hours == 252


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        "not json at all",
        "[1, 2, 3]",
        json.dumps({"title": "No steps here"}),
        json.dumps({"title": "Wrong type", "steps": "step one, step two"}),
        json.dumps({"steps": []}),
    ],
)
async def test_unusable_llm_response_falls_back(response) -> None:
    client = AsyncMock()
    client.complete_json.return_value = response

    result = await PlanSynthesizer(client=client).generate(rust_request())

    assert result.source is PlanSource.smart_mock
    assert result.content == synthesize_plan(rust_request())


@pytest.mark.asyncio
async def test_slow_llm_times_out_to_templates() -> None:
    async def slow(*args, **kwargs):
        await asyncio.sleep(1)
        return "{}"

    client = AsyncMock()
    client.complete_json.side_effect = slow
    synthesizer = PlanSynthesizer(client=client)
    synthesizer.timeout = 0.01

    result = await synthesizer.generate(rust_request())

    assert result.source is PlanSource.smart_mock


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw_duration,expected",
    [
        ('"6 Weeks"', "6 Weeks"),
        ("12", "12 Weeks"),
        ("12.5", "12.5 Weeks"),
        ("Infinity", "12 Weeks"),
        ("-3", "12 Weeks"),
        ("1e300", "12 Weeks"),
        (json.dumps("about " + "twelve " * 10 + "weeks"), "12 Weeks"),
    ],
)
async def test_llm_duration_label_fits_column(raw_duration, expected) -> None:
    client = AsyncMock()
    client.complete_json.return_value = (
        '{"title": "Rust", "steps": ["one"], "duration": %s}' % raw_duration
    )

    result = await PlanSynthesizer(client=client).generate(rust_request())

    assert result.source is PlanSource.openai
    assert result.content.duration == expected
    assert len(result.content.duration) <= 50
