from typing import Sequence

from asyncpg import Pool

from stepchat.core.models import ChatTurn
from stepchat.core.pipeline import Pipeline


class PostgresChatRepository:
    def __init__(self, pool: Pool):
        self.pool = pool

    async def create(self, turn: ChatTurn) -> None:
        pipeline = Pipeline.from_steps(turn.pipeline).to_transport_form() if turn.pipeline is not None else None
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO stepchat.chats (chat_id, user_id, prompt, pipeline, result, created_at)
                VALUES ($1, $2, $3, $4::jsonb, $5, $6)
                """,
                turn.chat_id,
                turn.user_id,
                turn.prompt,
                pipeline,
                turn.result,
                turn.created_at,
            )

    async def list_recent(self, user_id: str, limit: int = 10, before: str | None = None) -> Sequence[ChatTurn]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT chat_id, user_id, prompt, pipeline::text AS pipeline, result, created_at
                FROM stepchat.chats
                WHERE user_id = $1
                  AND (
                    $3::text IS NULL
                    OR (created_at, chat_id) < (
                        SELECT created_at, chat_id FROM stepchat.chats WHERE user_id = $1 AND chat_id = $3::text
                    )
                  )
                ORDER BY created_at DESC, chat_id DESC
                LIMIT $2
                """,
                user_id,
                limit,
                before,
            )
        turns = [
            ChatTurn(
                chat_id=row["chat_id"],
                user_id=row["user_id"],
                prompt=row["prompt"],
                pipeline=list(Pipeline.from_transport_form(row["pipeline"])) if row["pipeline"] else None,
                result=row["result"],
                created_at=row["created_at"],
            )
            for row in rows
        ]
        turns.reverse()
        return turns
