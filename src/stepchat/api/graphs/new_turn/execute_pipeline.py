import logging

from langgraph.runtime import Runtime

from stepchat.api.graphs.new_turn.models import NewTurnGraphContext, NewTurnGraphState
from stepchat.core.catalog import format_pipeline_label
from stepchat.core.models import ExecutionFailure
from stepchat.core.pipeline import Pipeline


async def execute_pipeline(state: NewTurnGraphState, runtime: Runtime[NewTurnGraphContext]) -> NewTurnGraphState:
    steps = state.pipeline or []
    logging.info(f"Executing pipeline: {format_pipeline_label(steps) or '(empty)'}")
    outcome = await runtime.context.pipeline_executor.execute(Pipeline.from_steps(steps), state.prompt)
    if isinstance(outcome, ExecutionFailure):
        state.status = "failed"
        state.error = outcome.message
        state.failed_step = outcome.failed_step
        return state
    state.result = outcome
    return state
