import asyncio
import os

import uvicorn
from dishka.integrations.fastapi import setup_dishka

from stepchat.api import create_app
from stepchat.api.infrastructure.util.opentelemetry import TelemetrySetup
from stepchat.core.container import make_container
from stepchat.core.settings import Settings


async def main() -> None:
    settings = Settings()
    TelemetrySetup(settings).configure()

    app = create_app()
    container = make_container(settings)
    setup_dishka(container, app)

    uvicorn_config = uvicorn.Config(
        app,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8000)),
        log_level=os.environ.get("LOG_LEVEL", "info"),
        access_log=True,
    )
    uvicorn_server = uvicorn.Server(uvicorn_config)
    try:
        await uvicorn_server.serve()
    finally:
        await container.close()


if __name__ == "__main__":
    asyncio.run(main())
