import asyncio
from typing import Sequence

from stepchat.core.models import ChatTurn


def _keyset(turn: ChatTurn) -> tuple:
    return (turn.created_at, turn.chat_id)


class InMemoryChatRepository:
    def __init__(self) -> None:
        self._turns: list[ChatTurn] = []
        self._lock = asyncio.Lock()

    async def create(self, turn: ChatTurn) -> None:
        async with self._lock:
            self._turns.append(turn)

    async def list_recent(self, user_id: str, limit: int = 10, before: str | None = None) -> Sequence[ChatTurn]:
        async with self._lock:
            items = sorted((turn for turn in self._turns if turn.user_id == user_id), key=_keyset)
        if before is not None:
            cursor = next((turn for turn in items if turn.chat_id == before), None)
            if cursor is None:
                return []
            items = [turn for turn in items if _keyset(turn) < _keyset(cursor)]
        return items[-limit:] if limit > 0 else []
