from stepchat.api.infrastructure.interfaces import IdentityProvider
from stepchat.core.errors import AuthenticationError
from stepchat.core.models import User


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_user(identity: IdentityProvider, authorization: str | None) -> User:
    token = bearer_token(authorization)
    if token is None:
        raise AuthenticationError("Missing bearer token")
    user = await identity.resolve(token)
    if user is None:
        raise AuthenticationError("Unknown or expired access token")
    return user
