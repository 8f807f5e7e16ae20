import logging
from functools import partial

from opentelemetry.trace import get_current_span, get_tracer

from stepchat.api.infrastructure.interfaces import TextGenerator
from stepchat.core.catalog import format_label, render_instruction
from stepchat.core.models import ExecutionFailure, Step
from stepchat.core.pipeline import Pipeline
from stepchat.core.retry import RetryPolicy


class SequentialPipelineExecutor:
    """Runs steps strictly in order, feeding each step the previous step's output.

    The run is all-or-nothing: a failing step discards everything produced so far.
    """

    def __init__(self, text_generator: TextGenerator, retry_policy: RetryPolicy) -> None:
        self.text_generator = text_generator
        self.retry_policy = retry_policy

    @get_tracer(__name__).start_as_current_span("execute_step")
    async def _execute_step(self, position: int, step: Step, current_output: str) -> str:
        span = get_current_span()
        span.set_attribute("step.position", position)
        span.set_attribute("step.kind", step.kind.value)
        instruction = render_instruction(step, current_output)
        return await self.retry_policy.run(partial(self.text_generator.generate, instruction))

    async def execute(self, pipeline: Pipeline, input_text: str) -> str | ExecutionFailure:
        current_output = input_text
        for position, step in enumerate(pipeline):
            try:
                current_output = await self._execute_step(position, step, current_output)
            except Exception as exc:
                logging.warning(f"Pipeline step #{position} ({format_label(step)}) failed: {exc!r}")
                return ExecutionFailure(failed_step=position)
        return current_output
