from typing import Annotated

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse

from stepchat.api.infrastructure.interfaces import IdentityProvider, PipelinePlanner
from stepchat.api.models import (
    AppendOperation,
    ClearOperation,
    EditPipelineRequest,
    ErrorResponse,
    MoveDownOperation,
    MoveUpOperation,
    PipelineResponse,
    PlanRequest,
    RemoveOperation,
)
from stepchat.api.security import require_user
from stepchat.core.models import PlanningFailure
from stepchat.core.pipeline import Pipeline

pipeline_router = APIRouter(prefix="/pipelines")


@pipeline_router.post("/plan", responses={502: {"model": ErrorResponse}})
@inject
async def plan_pipeline(
    plan_request: PlanRequest,
    planner: FromDishka[PipelinePlanner],
    identity: FromDishka[IdentityProvider],
    authorization: Annotated[str | None, Header()] = None,
):
    await require_user(identity, authorization)
    outcome = await planner.plan(plan_request.goal)
    if isinstance(outcome, PlanningFailure):
        return JSONResponse(status_code=502, content=ErrorResponse(error=outcome.message).model_dump())
    return PipelineResponse.from_domain(outcome)


@pipeline_router.post("/edit")
@inject
async def edit_pipeline(
    edit_request: EditPipelineRequest,
    identity: FromDishka[IdentityProvider],
    authorization: Annotated[str | None, Header()] = None,
) -> PipelineResponse:
    await require_user(identity, authorization)
    pipeline = Pipeline.from_transport_form(edit_request.pipeline)
    match edit_request.operation:
        case AppendOperation(kind=kind, parameter=parameter):
            pipeline.append(kind, parameter)
        case RemoveOperation(step_id=step_id):
            pipeline.remove(step_id)
        case MoveUpOperation(index=index):
            pipeline.move_up(index)
        case MoveDownOperation(index=index):
            pipeline.move_down(index)
        case ClearOperation():
            pipeline.clear()
    return PipelineResponse.from_domain(pipeline)
