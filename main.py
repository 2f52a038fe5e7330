from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import Settings, get_settings
from controllers import contact_controller, home_controller
from middleware.rate_limiter import RateLimitStore, RateLimitSweeper
from utils.brevo_client import BrevoClient
from utils.exceptions import (
    ContactAPIException,
    contact_exception_handler,
    general_exception_handler,
    http_exception_handler,
)
from utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RateLimitStore] = None,
    email_client=None,
) -> FastAPI:
    """
    Build the application and its shared state.

    The rate limit store, its sweeper and the email client are created here
    (or injected by tests) and attached to app.state.
    """
    if settings is None:
        settings = get_settings()
    if store is None:
        store = RateLimitStore()
    if email_client is None:
        email_client = BrevoClient(settings)
    sweeper = RateLimitSweeper(store, interval_seconds=settings.rate_limit_sweep_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Check delivery config and run the rate limit sweeper for the app's lifetime"""
        logger.info(f"Starting application (env={settings.app_env})...")
        if settings.is_production:
            settings.ensure_delivery_configured()
        sweeper.start()
        logger.info("Application started successfully")
        yield
        logger.info("Shutting down application...")
        await sweeper.stop()

    app = FastAPI(
        lifespan=lifespan,
        title="Contact Form API",
        description="Validates contact form submissions and forwards them by email",
        version="1.0.0"
    )

    app.state.settings = settings
    app.state.rate_limit_store = store
    app.state.rate_limit_sweeper = sweeper
    app.state.email_client = email_client

    # Register exception handlers
    app.add_exception_handler(ContactAPIException, contact_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    prefix = "/api"

    app.include_router(home_controller.router)
    app.include_router(contact_controller.router, prefix=prefix)

    return app


_settings = get_settings()
setup_logging(log_level=_settings.log_level)
app = create_app(_settings)
