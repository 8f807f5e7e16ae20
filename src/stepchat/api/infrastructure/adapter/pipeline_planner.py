import json
import logging
from functools import partial
from textwrap import dedent

from opentelemetry.trace import get_current_span, get_tracer
from pydantic import BaseModel, ValidationError

from stepchat.api.infrastructure.interfaces import TextGenerator
from stepchat.core.json_repair import quote_bare_keys
from stepchat.core.models import PlanningFailure, Step, StepKind
from stepchat.core.pipeline import Pipeline
from stepchat.core.retry import RetryPolicy

STEP_EXAMPLES = """[
  {"type": "summarize"},
  {"type": "rewrite", "param": "casual"},
  {"type": "extract", "param": "keywords"},
  {"type": "translate", "param": "French"}
]"""

PLANNER_TEMPLATE = dedent(
    """
    Create a step-by-step text processing pipeline for this goal: {goal}

    Only return a JSON array of steps like:
    {examples}

    Rules:
    - "type" can only be one of {kinds}.
    - "param" for rewrite is a tone such as "casual", "formal" or "professional".
    - "param" for extract is what to pull out, such as "keywords" or "entities".
    - "param" for translate is the target language, such as "English", "French", "Italian" or "Dutch".
    - Not every type has to appear. Add only the steps the goal needs and omit irrelevant ones.
    - Return pure JSON. Do not start with "Here is the JSON array..." or wrap it in any other text.
    """
).strip()


class PlannedStep(BaseModel):
    """One element of the planner model's JSON answer."""

    type: StepKind
    param: str | None = None


def build_planner_instruction(goal: str) -> str:
    kinds = ", ".join(f'"{kind.value}"' for kind in StepKind)
    return PLANNER_TEMPLATE.format(goal=goal, examples=STEP_EXAMPLES, kinds=kinds)


def parse_planned_pipeline(raw: str) -> Pipeline | PlanningFailure:
    try:
        payload = json.loads(quote_bare_keys(raw))
    except json.JSONDecodeError as exc:
        logging.warning(f"Planner answer is not JSON ({exc.msg}): {raw!r}")
        return PlanningFailure()
    if isinstance(payload, dict):
        # a lone step object is a one-step plan
        payload = [payload]
    if not isinstance(payload, list):
        logging.warning(f"Planner answer is not a JSON array: {raw!r}")
        return PlanningFailure()

    steps: list[Step] = []
    for position, element in enumerate(payload):
        try:
            planned = PlannedStep.model_validate(element)
        except ValidationError as exc:
            logging.warning(f"Rejected planned step #{position} {element!r}: {exc.error_count()} validation errors")
            continue
        steps.append(Step(kind=planned.type, parameter=planned.param or None))  # type: ignore[call-arg]

    if payload and not steps:
        logging.warning(f"Planner answer contained no usable steps: {raw!r}")
        return PlanningFailure()
    return Pipeline.from_steps(steps)


class TextGenerationPipelinePlanner:
    def __init__(self, text_generator: TextGenerator, retry_policy: RetryPolicy) -> None:
        self.text_generator = text_generator
        self.retry_policy = retry_policy

    @get_tracer(__name__).start_as_current_span("plan_pipeline")
    async def plan(self, goal: str) -> Pipeline | PlanningFailure:
        goal = goal.strip()
        if not goal:
            return PlanningFailure()

        instruction = build_planner_instruction(goal)
        try:
            raw = await self.retry_policy.run(partial(self.text_generator.generate, instruction))
        except Exception as exc:
            logging.warning(f"Pipeline generation failed: {exc!r}")
            return PlanningFailure()

        result = parse_planned_pipeline(raw)
        if isinstance(result, Pipeline):
            get_current_span().set_attribute("pipeline.length", len(result))
        return result
