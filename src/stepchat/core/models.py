from datetime import UTC, datetime
from enum import Enum

import nanoid
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class StepKind(str, Enum):
    SUMMARIZE = "summarize"
    TRANSLATE = "translate"
    REWRITE = "rewrite"
    EXTRACT = "extract"


class Step(BaseModel):
    """One transformation unit of a pipeline.

    Validation also accepts the `type` / `param` names used by browser clients
    and by the planner's model output; dumps always use `kind` / `parameter`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default_factory=nanoid.generate, min_length=1)
    kind: StepKind = Field(validation_alias=AliasChoices("kind", "type"))
    parameter: str | None = Field(default=None, validation_alias=AliasChoices("parameter", "param"))


class User(BaseModel):
    user_id: str = Field(min_length=1)
    email: str | None = None


class ChatTurn(BaseModel):
    chat_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    prompt: str = Field(min_length=1)
    pipeline: list[Step] | None = None
    result: str
    created_at: datetime

    @field_validator("created_at", mode="after")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class PlanningFailure(BaseModel):
    message: str = "Failed to generate pipeline. Try again."


class ExecutionFailure(BaseModel):
    message: str = "Pipeline execution failed. Try again."
    failed_step: int | None = None
