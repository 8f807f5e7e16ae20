from asyncpg import Pool


class PostgresInit:
    def __init__(self, pool: Pool):
        self.pool = pool

    DATABASE_INIT = """
        CREATE SCHEMA IF NOT EXISTS stepchat;
    """

    CREATE_TABLE_CHAT = """
        CREATE TABLE IF NOT EXISTS stepchat.chats (
            chat_id VARCHAR(255) NOT NULL,
            user_id VARCHAR(255) NOT NULL,
            prompt TEXT NOT NULL,
            pipeline JSONB,
            result TEXT NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,

            PRIMARY KEY (chat_id)
        );
        CREATE INDEX IF NOT EXISTS stepchat_chats_user_id_created_at_chat_id_idx
        ON stepchat.chats (user_id, created_at DESC, chat_id DESC);
    """

    async def run(self):
        async with self.pool.acquire() as conn:
            await conn.execute(self.DATABASE_INIT)
            await conn.execute(self.CREATE_TABLE_CHAT)
