from contextlib import asynccontextmanager

from fastapi import FastAPI

from buildhook.core.cache import close_cache
from buildhook.core.config import get_settings
from buildhook.core.middleware import RequestIdMiddleware
from buildhook.webhooks.router import router as webhooks_router


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    yield
    await close_cache()


def create_app() -> FastAPI:
    settings = get_settings()

    _app = FastAPI(
        title="Snap Build Webhooks",
        description="Authenticates GitHub push notifications and requests snap builds",
        version="0.1.0",
        lifespan=_lifespan,
    )

    # ---------------------------------------------------------------------------
    # Middleware
    # ---------------------------------------------------------------------------

    # Request ID: inject / forward X-Request-ID and bind to ContextVar
    _app.add_middleware(RequestIdMiddleware)

    # ---------------------------------------------------------------------------
    # Sentry: initialised here so it captures startup errors too
    # ---------------------------------------------------------------------------
    from buildhook.core.sentry import init_sentry

    init_sentry(
        dsn=settings.sentry_dsn,
        environment="development" if settings.debug else "production",
    )

    # ---------------------------------------------------------------------------
    # Logging: configure structlog before any routers log anything
    # ---------------------------------------------------------------------------
    from buildhook.core.logging import configure_structlog

    configure_structlog(debug=settings.debug)

    # ---------------------------------------------------------------------------
    # Routes
    # ---------------------------------------------------------------------------

    @_app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    _app.include_router(webhooks_router)

    return _app


app = create_app()
