from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, InstanceOf

from stepchat.api.infrastructure.interfaces import (
    ChatRepository,
    Clock,
    IdGenerator,
    PipelineExecutor,
    TextGenerator,
)
from stepchat.core.models import ChatTurn, Step, User
from stepchat.core.retry import RetryPolicy


class NewTurnGraphState(BaseModel):
    user: User
    prompt: str
    pipeline: Optional[list[Step]] = None
    status: Literal["processing", "completed", "failed"] = "processing"
    result: Optional[str] = None
    error: Optional[str] = None
    failed_step: Optional[int] = None
    turn: Optional[ChatTurn] = None


class NewTurnGraphContext(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    clock: Clock
    id_generator: IdGenerator
    chat_repository: ChatRepository
    text_generator: TextGenerator
    pipeline_executor: PipelineExecutor
    retry_policy: InstanceOf[RetryPolicy]
