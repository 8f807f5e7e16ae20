from collections.abc import AsyncIterable

from asyncpg import Pool, create_pool
from dishka import AsyncContainer, Provider, Scope, make_async_container, provide

from stepchat.api.infrastructure.adapter.pipeline_executor import SequentialPipelineExecutor
from stepchat.api.infrastructure.adapter.pipeline_planner import TextGenerationPipelinePlanner
from stepchat.api.infrastructure.adapter.pydantic_ai_text_generator import PydanticAITextGenerator
from stepchat.api.infrastructure.adapter.static_identity import StaticIdentityProvider
from stepchat.api.infrastructure.adapter.supabase_identity import SupabaseIdentityProvider
from stepchat.api.infrastructure.interfaces import (
    ChatRepository,
    Clock,
    IdentityProvider,
    IdGenerator,
    PipelineExecutor,
    PipelinePlanner,
    TextGenerator,
)
from stepchat.api.infrastructure.repository.memory_chat import InMemoryChatRepository
from stepchat.api.infrastructure.repository.postgres_chat import PostgresChatRepository
from stepchat.api.infrastructure.repository.postgres_init import PostgresInit
from stepchat.api.infrastructure.util.nanoid_generator import NanoidGenerator
from stepchat.api.infrastructure.util.simple_clock import SimpleClock
from stepchat.core.retry import RetryPolicy
from stepchat.core.settings import Settings


class CoreProvider(Provider):
    scope = Scope.APP

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self._settings = settings

    @provide
    def settings(self) -> Settings:
        return self._settings or Settings()


class ConnectionProvider(Provider):
    scope = Scope.APP

    @provide
    async def database_pool(self, settings: Settings) -> AsyncIterable[Pool]:
        pool = await create_pool(dsn=settings.DATABASE_URI)
        await PostgresInit(pool).run()
        yield pool
        await pool.close()


class RepositoryProvider(Provider):
    scope = Scope.APP

    chat_repository = provide(source=PostgresChatRepository, provides=ChatRepository)


class InMemoryRepositoryProvider(Provider):
    scope = Scope.APP

    chat_repository = provide(source=InMemoryChatRepository, provides=ChatRepository)


class UtilProvider(Provider):
    scope = Scope.APP

    clock = provide(source=SimpleClock, provides=Clock)
    id_generator = provide(source=NanoidGenerator, provides=IdGenerator)

    @provide
    def retry_policy(self, settings: Settings) -> RetryPolicy:
        return RetryPolicy(
            max_retries=settings.RETRY_MAX_RETRIES,
            initial_delay_ms=settings.RETRY_INITIAL_DELAY_MS,
        )

    @provide
    def identity_provider(self, settings: Settings) -> IdentityProvider:
        if settings.SUPABASE_URL:
            return SupabaseIdentityProvider(settings)
        return StaticIdentityProvider(settings.STATIC_ACCESS_TOKENS)


class AgentProvider(Provider):
    scope = Scope.APP

    @provide
    def text_generator(self, settings: Settings) -> TextGenerator:
        return PydanticAITextGenerator.from_settings(settings)

    pipeline_planner = provide(source=TextGenerationPipelinePlanner, provides=PipelinePlanner)
    pipeline_executor = provide(source=SequentialPipelineExecutor, provides=PipelineExecutor)


def make_container(settings: Settings | None = None) -> AsyncContainer:
    settings = settings or Settings()
    if settings.USE_IN_MEMORY_STORAGE:
        storage: list[Provider] = [InMemoryRepositoryProvider()]
    else:
        storage = [ConnectionProvider(), RepositoryProvider()]
    return make_async_container(
        CoreProvider(settings),
        *storage,
        UtilProvider(),
        AgentProvider(),
    )
