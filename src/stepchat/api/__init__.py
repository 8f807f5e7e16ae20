"""FastAPI application factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from stepchat.api.models import ErrorResponse
from stepchat.api.routers.auth import auth_router
from stepchat.api.routers.chat import chat_router
from stepchat.api.routers.core import core_router
from stepchat.api.routers.pipelines import pipeline_router
from stepchat.core.errors import AuthenticationError, ValidationFailure


async def authentication_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.info(f"Rejected unauthenticated request to {request.url.path}: {exc}")
    return JSONResponse(status_code=401, content=ErrorResponse(error="Not authenticated").model_dump())


async def validation_failure_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=422, content=ErrorResponse(error=str(exc)).model_dump())


def create_app() -> FastAPI:
    app = FastAPI(title="Stepchat API")

    app.include_router(core_router, tags=["core"])
    app.include_router(auth_router, tags=["auth"])
    app.include_router(chat_router, tags=["chats"])
    app.include_router(pipeline_router, tags=["pipelines"])
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(ValidationFailure, validation_failure_handler)
    FastAPIInstrumentor.instrument_app(app)

    return app
