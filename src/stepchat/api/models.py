"""Request and response payloads shared by the HTTP routers."""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from stepchat.core.catalog import format_pipeline_label
from stepchat.core.models import ChatTurn, Step
from stepchat.core.pipeline import Pipeline

# Transport form as sent by clients: a JSON string or an already decoded array.
PipelinePayload = Union[str, list[dict[str, Any]]]


def parse_pipeline_payload(payload: PipelinePayload | None) -> Pipeline | None:
    """`None` or an empty string means no pipeline; anything else must be a valid transport form."""
    if payload is None:
        return None
    if isinstance(payload, str) and not payload.strip():
        return None
    return Pipeline.from_transport_form(payload)


class ErrorResponse(BaseModel):
    error: str


class PipelineResponse(BaseModel):
    pipeline: list[Step]
    label: str

    @classmethod
    def from_domain(cls, pipeline: Pipeline) -> "PipelineResponse":
        return cls(pipeline=list(pipeline), label=format_pipeline_label(pipeline))


class ChatTurnResponse(BaseModel):
    chat_id: str
    prompt: str
    pipeline: list[Step] | None
    pipeline_label: str
    result: str
    created_at: datetime

    @classmethod
    def from_domain(cls, turn: ChatTurn) -> "ChatTurnResponse":
        return cls(
            chat_id=turn.chat_id,
            prompt=turn.prompt,
            pipeline=turn.pipeline,
            pipeline_label=format_pipeline_label(turn.pipeline),
            result=turn.result,
            created_at=turn.created_at,
        )


class ChatHistoryResponse(BaseModel):
    chats: list[ChatTurnResponse]
    next_cursor: str | None = None


class NewTurnRequest(BaseModel):
    prompt: str = Field(min_length=1)
    pipeline: PipelinePayload | None = None


class PlanRequest(BaseModel):
    goal: str = Field(min_length=1)


class AppendOperation(BaseModel):
    op: Literal["append"]
    kind: str
    parameter: str | None = None


class RemoveOperation(BaseModel):
    op: Literal["remove"]
    step_id: str


class MoveUpOperation(BaseModel):
    op: Literal["move_up"]
    index: int


class MoveDownOperation(BaseModel):
    op: Literal["move_down"]
    index: int


class ClearOperation(BaseModel):
    op: Literal["clear"]


PipelineOperation = Annotated[
    Union[AppendOperation, RemoveOperation, MoveUpOperation, MoveDownOperation, ClearOperation],
    Field(discriminator="op"),
]


class EditPipelineRequest(BaseModel):
    pipeline: PipelinePayload = "[]"
    operation: PipelineOperation
