import logging
from typing import Annotated

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse

from stepchat.api.graphs.new_turn import NewTurnGraphContext, NewTurnGraphState, new_turn_graph
from stepchat.api.infrastructure.interfaces import (
    ChatRepository,
    Clock,
    IdGenerator,
    IdentityProvider,
    PipelineExecutor,
    TextGenerator,
)
from stepchat.api.models import (
    ChatHistoryResponse,
    ChatTurnResponse,
    ErrorResponse,
    NewTurnRequest,
    parse_pipeline_payload,
)
from stepchat.api.security import require_user
from stepchat.core.retry import RetryPolicy
from stepchat.core.settings import Settings

chat_router = APIRouter()


@chat_router.get("/chats")
@inject
async def list_chats(
    settings: FromDishka[Settings],
    chat_repo: FromDishka[ChatRepository],
    identity: FromDishka[IdentityProvider],
    authorization: Annotated[str | None, Header()] = None,
    before: Annotated[str | None, Query(min_length=1)] = None,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> ChatHistoryResponse:
    user = await require_user(identity, authorization)
    page_size = limit or settings.CHAT_HISTORY_PAGE_SIZE
    turns = await chat_repo.list_recent(user.user_id, limit=page_size, before=before)
    next_cursor = turns[0].chat_id if len(turns) == page_size else None
    return ChatHistoryResponse(
        chats=[ChatTurnResponse.from_domain(turn) for turn in turns],
        next_cursor=next_cursor,
    )


@chat_router.post("/chats", responses={502: {"model": ErrorResponse}})
@inject
async def new_turn(
    new_turn_request: NewTurnRequest,
    chat_repo: FromDishka[ChatRepository],
    identity: FromDishka[IdentityProvider],
    clock: FromDishka[Clock],
    id_generator: FromDishka[IdGenerator],
    text_generator: FromDishka[TextGenerator],
    pipeline_executor: FromDishka[PipelineExecutor],
    retry_policy: FromDishka[RetryPolicy],
    authorization: Annotated[str | None, Header()] = None,
):
    user = await require_user(identity, authorization)
    pipeline = parse_pipeline_payload(new_turn_request.pipeline)

    init_state = NewTurnGraphState(
        user=user,
        prompt=new_turn_request.prompt,
        pipeline=list(pipeline) if pipeline is not None else None,
    )
    graph_context = NewTurnGraphContext(
        clock=clock,
        id_generator=id_generator,
        chat_repository=chat_repo,
        text_generator=text_generator,
        pipeline_executor=pipeline_executor,
        retry_policy=retry_policy,
    )
    final_state = NewTurnGraphState.model_validate(await new_turn_graph.ainvoke(init_state, context=graph_context))

    if final_state.status != "completed" or final_state.turn is None:
        logging.info(f"Turn for user {user.user_id} failed at step {final_state.failed_step}")
        return JSONResponse(
            status_code=502,
            content=ErrorResponse(error=final_state.error or "Something went wrong. Try again.").model_dump(),
        )
    return ChatTurnResponse.from_domain(final_state.turn)
