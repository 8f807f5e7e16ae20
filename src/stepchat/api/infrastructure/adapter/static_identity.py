from stepchat.core.models import User


class StaticIdentityProvider:
    """Fixed token table for local runs without Supabase."""

    def __init__(self, tokens: dict[str, str]) -> None:
        self.tokens = dict(tokens)

    async def resolve(self, access_token: str) -> User | None:
        user_id = self.tokens.get(access_token)
        if user_id is None:
            return None
        return User(user_id=user_id)

    async def sign_out(self, access_token: str) -> None:
        self.tokens.pop(access_token, None)
