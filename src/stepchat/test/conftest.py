from collections import deque
from typing import AsyncIterable, Iterator

import pytest
from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI
from fastapi.testclient import TestClient

from stepchat.api.infrastructure.interfaces import TextGenerator
from stepchat.core.container import AgentProvider, CoreProvider, InMemoryRepositoryProvider, UtilProvider
from stepchat.core.retry import RetryPolicy
from stepchat.core.settings import Settings

TEST_ACCESS_TOKENS = {"token-alice": "alice", "token-bob": "bob"}


class ScriptedTextGenerator:
    """Replays queued replies or exceptions, then falls back to a numbered reply."""

    def __init__(self) -> None:
        self.instructions: list[str] = []
        self.script: deque[str | Exception] = deque()

    def enqueue(self, *outcomes: str | Exception) -> None:
        self.script.extend(outcomes)

    async def generate(self, instruction: str) -> str:
        self.instructions.append(instruction)
        if not self.script:
            return f"generated {len(self.instructions)}"
        outcome = self.script.popleft()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class TestProvider(Provider):
    scope = Scope.APP

    def __init__(self, text_generator: ScriptedTextGenerator, sleep: RecordingSleep) -> None:
        super().__init__()
        self._text_generator = text_generator
        self._sleep = sleep

    @provide(override=True)
    def text_generator(self) -> TextGenerator:
        return self._text_generator

    @provide(override=True)
    def retry_policy(self, settings: Settings) -> RetryPolicy:
        return RetryPolicy(
            max_retries=settings.RETRY_MAX_RETRIES,
            initial_delay_ms=settings.RETRY_INITIAL_DELAY_MS,
            sleep=self._sleep,
        )


@pytest.fixture
def text_generator() -> ScriptedTextGenerator:
    return ScriptedTextGenerator()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def retry_policy(recording_sleep: RecordingSleep) -> RetryPolicy:
    return RetryPolicy(sleep=recording_sleep)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DEBUG_MODE=True,
        USE_IN_MEMORY_STORAGE=True,
        SUPABASE_URL="",
        STATIC_ACCESS_TOKENS=TEST_ACCESS_TOKENS,
        CHAT_HISTORY_PAGE_SIZE=10,
    )


@pytest.fixture
async def test_container(
    test_settings: Settings,
    text_generator: ScriptedTextGenerator,
    recording_sleep: RecordingSleep,
) -> AsyncIterable[AsyncContainer]:
    container = make_async_container(
        CoreProvider(test_settings),
        InMemoryRepositoryProvider(),
        UtilProvider(),
        AgentProvider(),
        TestProvider(text_generator, recording_sleep),
    )
    yield container
    await container.close()


@pytest.fixture
def test_app(test_container: AsyncContainer) -> FastAPI:
    from stepchat.api import create_app

    app = create_app()
    setup_dishka(test_container, app)
    return app


@pytest.fixture
def test_client(test_app: FastAPI) -> Iterator[TestClient]:
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-bob"}
