from typing import Annotated

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Header, Response

from stepchat.api.infrastructure.interfaces import IdentityProvider
from stepchat.api.security import bearer_token, require_user

auth_router = APIRouter(prefix="/auth")


@auth_router.post("/signout")
@inject
async def sign_out(
    identity: FromDishka[IdentityProvider],
    authorization: Annotated[str | None, Header()] = None,
):
    await require_user(identity, authorization)
    await identity.sign_out(bearer_token(authorization) or "")
    return Response(status_code=204)
