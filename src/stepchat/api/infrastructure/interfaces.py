from datetime import datetime
from typing import Protocol, Sequence, runtime_checkable

from stepchat.core.models import ChatTurn, ExecutionFailure, PlanningFailure, User
from stepchat.core.pipeline import Pipeline


@runtime_checkable
class TextGenerator(Protocol):
    async def generate(self, instruction: str) -> str: ...


@runtime_checkable
class ChatRepository(Protocol):
    async def create(self, turn: ChatTurn) -> None: ...
    async def list_recent(self, user_id: str, limit: int = 10, before: str | None = None) -> Sequence[ChatTurn]: ...


@runtime_checkable
class IdentityProvider(Protocol):
    async def resolve(self, access_token: str) -> User | None: ...
    async def sign_out(self, access_token: str) -> None: ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...


@runtime_checkable
class IdGenerator(Protocol):
    def generate_id(self) -> str: ...


@runtime_checkable
class PipelinePlanner(Protocol):
    async def plan(self, goal: str) -> Pipeline | PlanningFailure: ...


@runtime_checkable
class PipelineExecutor(Protocol):
    async def execute(self, pipeline: Pipeline, input_text: str) -> str | ExecutionFailure: ...
