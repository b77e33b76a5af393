"""Study plan content synthesis.

Plans are produced by one of two strategies:

1. Delegated generation: an LLM is asked for a JSON plan. Used only when a
   generative-text client is configured.
2. Deterministic synthesis: a fixed four-phase template (Foundation, Core
   Learning, Advanced Topics, Mastery) spread over the requested weeks.

Any failure of the first strategy (network error, timeout, unusable
response) is logged and absorbed; the caller always receives a plan, along
with the source tag of the strategy that actually produced it.
"""

import asyncio
import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from pydantic import BaseModel

from sp.clients.openai_api import OpenAIClient
from sp.config import get_settings
from sp.errors import ExternalServiceError, ValidationError
from sp.models import Difficulty, PlanSource
from sp.schemas.study_plans import PlanContent, PlanGenerateRequest

logger = logging.getLogger(__name__)

DEFAULT_DAILY_HOURS = 2.0
DEFAULT_DIFFICULTY = Difficulty.intermediate
DEFAULT_DURATION_WEEKS = 8
MAX_DURATION_LABEL = 50

PHASES = [
    (
        "Foundation",
        "Learn the core terminology and fundamentals of {topic} "
        "and set up your study environment",
    ),
    (
        "Core Learning",
        "Work through the essential concepts of {topic} "
        "with guided exercises and regular practice",
    ),
    (
        "Advanced Topics",
        "Explore advanced {topic} techniques and apply them "
        "to larger, realistic problems",
    ),
    (
        "Mastery",
        "Build a capstone project with {topic}, "
        "review weak areas and consolidate what you have learned",
    ),
]

SYSTEM_PROMPT = (
    "You are an expert curriculum designer. "
    "You always answer with a single JSON object and nothing else."
)


class GenerativeTextClient(Protocol):
    async def complete_json(self, prompt: str, system: Optional[str] = None) -> str:
        ...


class PlanRequest(BaseModel):
    """Normalized plan generation request."""

    topic: str
    daily_hours: float = DEFAULT_DAILY_HOURS
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    duration: int = DEFAULT_DURATION_WEEKS

    @classmethod
    def from_payload(cls, payload: PlanGenerateRequest) -> "PlanRequest":
        """Trim the topic and apply defaults for missing or unknown fields."""
        topic = (payload.topic or "").strip()
        if not topic:
            raise ValidationError("Topic is required and must be a non-empty string")

        try:
            difficulty = Difficulty(payload.difficulty)
        except ValueError:
            difficulty = DEFAULT_DIFFICULTY

        return cls(
            topic=topic,
            daily_hours=payload.daily_hours or DEFAULT_DAILY_HOURS,
            difficulty=difficulty,
            duration=payload.duration or DEFAULT_DURATION_WEEKS,
        )


@dataclass
class SynthesisResult:
    """Plan content plus the strategy that produced it."""

    content: PlanContent
    source: PlanSource


def _format_number(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _total_hours(request: PlanRequest) -> float:
    return request.daily_hours * 7 * request.duration


def default_title(topic: str) -> str:
    return f"Study Plan for {topic}"


def default_duration_label(weeks: float) -> str:
    return f"{_format_number(weeks)} Weeks"


def synthesize_plan(request: PlanRequest) -> PlanContent:
    """Build a four-phase plan from templates. Pure and deterministic."""
    total_hours = _total_hours(request)
    weeks_per_phase = math.ceil(request.duration / len(PHASES))

    steps = []
    for index, (name, template) in enumerate(PHASES):
        start = index * weeks_per_phase + 1
        if index == len(PHASES) - 1:
            end = request.duration
        else:
            end = (index + 1) * weeks_per_phase
        description = template.format(topic=request.topic)
        steps.append(f"Week {start}-{end}: {name} - {description}")

    description = (
        f"A {request.duration}-week {request.difficulty.value} plan for "
        f"{request.topic} at {_format_number(request.daily_hours)} hours per day "
        f"({_format_number(total_hours)} hours in total)."
    )

    return PlanContent(
        title=default_title(request.topic),
        duration=default_duration_label(request.duration),
        description=description,
        estimated_hours=total_hours,
        steps=steps,
    )


class PlanSynthesizer:
    """Produce plan content, preferring the LLM when one is configured."""

    def __init__(self, client: Optional[GenerativeTextClient] = None):
        self.client = client
        self.timeout = get_settings().openai_timeout

    @classmethod
    def from_settings(cls) -> "PlanSynthesizer":
        """Use the OpenAI client when an API key is configured."""
        settings = get_settings()
        client = OpenAIClient() if settings.openai_api_key else None
        return cls(client=client)

    async def generate(self, request: PlanRequest) -> SynthesisResult:
        """Generate plan content for ``request``."""
        if self.client is not None:
            try:
                content = await self._generate_delegated(request)
                return SynthesisResult(content=content, source=PlanSource.openai)
            except Exception as e:
                logger.warning(
                    "Delegated plan generation failed for topic %r, "
                    "using template plan: %s",
                    request.topic,
                    e,
                )

        return SynthesisResult(
            content=synthesize_plan(request), source=PlanSource.smart_mock
        )

    async def _generate_delegated(self, request: PlanRequest) -> PlanContent:
        prompt = self._build_prompt(request)

        async with asyncio.timeout(self.timeout):
            response = await self.client.complete_json(prompt, system=SYSTEM_PROMPT)

        return self._parse_response(response, request)

    def _build_prompt(self, request: PlanRequest) -> str:
        """Build the plan generation prompt."""
        return f"""Create a structured study plan for learning "{request.topic}".

Learner profile:
- Difficulty level: {request.difficulty.value}
- Daily study time: {_format_number(request.daily_hours)} hours
- Total duration: {request.duration} weeks

Provide a JSON response with:
1. title: A short, motivating plan title
2. duration: The plan length, e.g. "{default_duration_label(request.duration)}"
3. description: One or two sentences summarizing the plan
4. estimatedHours: Total study hours as a number
5. steps: An ordered list of strings, one per milestone, each starting with
   the week range it covers (e.g. "Week 1-2: ...")

JSON Response:"""

    def _parse_response(self, response: str, request: PlanRequest) -> PlanContent:
        """Parse the LLM response, applying defaults for missing fields.

        A response without any usable step is rejected so the caller falls
        back to the template plan.
        """
        try:
            data = json.loads(response)
        except (TypeError, json.JSONDecodeError) as exc:
            raise ExternalServiceError("Plan response is not valid JSON") from exc

        if not isinstance(data, dict):
            raise ExternalServiceError("Plan response is not a JSON object")

        raw_steps = data.get("steps")
        if not isinstance(raw_steps, list):
            raw_steps = []
        steps = [
            str(step).strip()
            for step in raw_steps
            if isinstance(step, (str, int, float)) and str(step).strip()
        ]
        if not steps:
            raise ExternalServiceError("Plan response contains no steps")

        return PlanContent(
            title=self._text(data.get("title")) or default_title(request.topic),
            duration=self._duration(data.get("duration"), request),
            description=self._text(data.get("description")),
            estimated_hours=self._hours(data.get("estimatedHours"), request),
            steps=steps,
        )

    @staticmethod
    def _text(value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    def _duration(self, value: Any, request: PlanRequest) -> str:
        # Labels must fit StudyPlan.duration
        default = default_duration_label(request.duration)
        if isinstance(value, bool):
            return default
        if isinstance(value, (int, float)):
            if value <= 0 or (isinstance(value, float) and not math.isfinite(value)):
                return default
            label = default_duration_label(value)
        else:
            label = self._text(value)
        if not label or len(label) > MAX_DURATION_LABEL:
            return default
        return label

    @staticmethod
    def _hours(value: Any, request: PlanRequest) -> float:
        # Numeric strings are coerced; anything else gets the computed total
        if not isinstance(value, bool):
            try:
                hours = float(value)
            except (TypeError, ValueError):
                hours = None
            if hours is not None and math.isfinite(hours) and hours > 0:
                return hours
        return _total_hours(request)

