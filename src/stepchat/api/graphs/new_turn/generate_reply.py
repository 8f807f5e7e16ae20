import logging
from functools import partial

from langgraph.runtime import Runtime

from stepchat.api.graphs.new_turn.models import NewTurnGraphContext, NewTurnGraphState

REPLY_FAILED_MESSAGE = "Something went wrong. Try again."


async def generate_reply(state: NewTurnGraphState, runtime: Runtime[NewTurnGraphContext]) -> NewTurnGraphState:
    logging.info("Generating direct reply")
    ctx = runtime.context
    try:
        state.result = await ctx.retry_policy.run(partial(ctx.text_generator.generate, state.prompt))
    except Exception as exc:
        logging.warning(f"Direct reply failed: {exc!r}")
        state.status = "failed"
        state.error = REPLY_FAILED_MESSAGE
    return state
