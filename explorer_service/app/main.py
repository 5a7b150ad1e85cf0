"""Explorer API entrypoint: ``create_app`` for ASGI servers, ``run`` for the CLI."""

from __future__ import annotations

from fastapi import FastAPI

from explorer_service.app.lifespan import lifespan
from explorer_service.app.middleware import configure_middleware
from explorer_service.app.router import setup_routers
from explorer_service.core.settings import get_settings


def create_app() -> FastAPI:
    """Build the explorer app: correlation-id middleware, ``/health`` and ``/graphql``."""
    settings = get_settings()

    application = FastAPI(
        title=settings.app.title,
        version=settings.app.version,
        debug=settings.app.debug,
        lifespan=lifespan,
    )
    configure_middleware(application)
    setup_routers(application, settings.app, settings.graphql)
    return application


app = create_app()


def run() -> None:
    import uvicorn

    from explorer_service.infra.logging import setup_logging

    setup_logging()
    settings = get_settings().app
    # our own logging config stays in place; uvicorn's loggers propagate to root
    uvicorn.run("explorer_service.app.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
