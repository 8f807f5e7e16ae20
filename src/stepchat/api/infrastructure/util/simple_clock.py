from datetime import UTC, datetime


class SimpleClock:
    def now(self) -> datetime:
        return datetime.now(tz=UTC)
