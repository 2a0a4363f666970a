from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api import health, registration, relayer
from .api.deps import RelayerDeps, build_relayer_deps
from .api.problems import register_problem_handlers
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware


def create_app(deps: Optional[RelayerDeps] = None) -> FastAPI:
    """
    Build the relay application.

    When ``deps`` is given it is used as-is and nothing is wired from
    settings; otherwise the execution client, account and nonce sequencer
    are built at startup and the client is closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if deps is not None:
            app.state.relayer = deps
            yield
            return

        setup_logging()
        relayer_deps, client = await build_relayer_deps(settings)
        app.state.relayer = relayer_deps
        try:
            yield
        finally:
            await client.close()

    app = FastAPI(
        title="Registration Relayer",
        description="Signs and submits registration and account creation transactions",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    if deps is not None:
        app.state.relayer = deps

    app.add_middleware(RequestLoggingMiddleware)
    register_problem_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(relayer.router, tags=["Relayer"])
    app.include_router(registration.router, tags=["Registration"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
