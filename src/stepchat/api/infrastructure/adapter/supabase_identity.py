import logging

import httpx
from opentelemetry.trace import get_tracer

from stepchat.core.errors import AuthenticationError
from stepchat.core.models import User
from stepchat.core.settings import Settings

UNAUTHORIZED_STATUSES = (401, 403)


class SupabaseIdentityProvider:
    """Resolves Supabase Auth access tokens to users through the Auth REST API."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport

    def _headers(self, access_token: str) -> dict[str, str]:
        return {
            "apikey": self.settings.SUPABASE_ANON_KEY,
            "Authorization": f"Bearer {access_token}",
        }

    def _url(self, path: str) -> str:
        return f"{self.settings.SUPABASE_URL.rstrip('/')}/auth/v1/{path}"

    @get_tracer(__name__).start_as_current_span("supabase_resolve_user")
    async def resolve(self, access_token: str) -> User | None:
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.get(self._url("user"), headers=self._headers(access_token), timeout=10)
            if response.status_code in UNAUTHORIZED_STATUSES:
                return None
            response.raise_for_status()
            payload = response.json()
            return User(user_id=payload["id"], email=payload.get("email"))
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logging.error(f"Supabase user lookup failed: {exc!r}")
            raise AuthenticationError("Could not verify access token") from exc

    @get_tracer(__name__).start_as_current_span("supabase_sign_out")
    async def sign_out(self, access_token: str) -> None:
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(self._url("logout"), headers=self._headers(access_token), timeout=10)
            if response.status_code in UNAUTHORIZED_STATUSES:
                logging.info("Sign out requested with an expired token")
                return
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logging.error(f"Supabase sign out failed: {exc!r}")
            raise AuthenticationError("Could not sign out") from exc
