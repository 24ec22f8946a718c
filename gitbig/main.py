from fastapi import FastAPI

from gitbig.api.routes.graph import router
from gitbig.core.middleware import GraphRateLimitMiddleware
from gitbig.core.observability import configure_logging
from gitbig.core.observability import init_sentry
from gitbig.settings import Settings


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the HTTP application with observability and rate limiting."""

    app_settings = app_settings or Settings()
    init_sentry(app_settings)
    configure_logging(app_settings)

    application = FastAPI(title="git big")
    application.add_middleware(
        GraphRateLimitMiddleware,
        limited_paths=app_settings.rate_limited_paths,
        requests_per_window=app_settings.rate_limit_per_minute,
        window_seconds=app_settings.rate_limit_window_seconds,
    )
    application.include_router(router)
    return application


app = create_app()
