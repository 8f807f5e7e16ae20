import logging

from langgraph.runtime import Runtime

from stepchat.api.graphs.new_turn.models import NewTurnGraphContext, NewTurnGraphState
from stepchat.core.models import ChatTurn

SAVE_FAILED_MESSAGE = "Something went wrong. Try again."


async def save_turn(state: NewTurnGraphState, runtime: Runtime[NewTurnGraphContext]) -> NewTurnGraphState:
    ctx = runtime.context
    turn = ChatTurn(
        chat_id=ctx.id_generator.generate_id(),
        user_id=state.user.user_id,
        prompt=state.prompt,
        pipeline=state.pipeline,
        result=state.result or "",
        created_at=ctx.clock.now(),
    )
    try:
        await ctx.chat_repository.create(turn)
    except Exception as exc:
        logging.error(f"Saving turn {turn.chat_id} for user {turn.user_id} failed: {exc!r}")
        state.status = "failed"
        state.error = SAVE_FAILED_MESSAGE
        return state
    state.turn = turn
    state.status = "completed"
    return state
