"""FastAPI application factory for every FreshCart context.

Each request runs inside the FreshCart domain context, so route handlers
and the command handlers they call can use ``current_domain``. The domain
must already be initialized when the app is created.
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from freshcart.analytics.api.routes import analytics_router
from freshcart.catalogue.api import product_router
from freshcart.domain import freshcart
from freshcart.fulfillment.api.routes import driver_router
from freshcart.identity.api.routes import admin_users_router, auth_router
from freshcart.notifications.api.routes import notification_router
from freshcart.ordering.api.routes import cart_router, order_router
from freshcart.shared.api import register_exception_handlers
from freshcart.shared.config import Settings
from freshcart.shared.logging import add_context, clear_context, configure_logging
from freshcart.utils.db import setup_db

logger = structlog.get_logger(__name__)


def _outbox_status() -> dict | None:
    """Outbox counts, when events leave through the outbox at all."""
    if not freshcart.config.get("enable_outbox", False):
        return None
    return freshcart._get_outbox_repo("default").count_by_status()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_create_schema:
            setup_db(freshcart)
        logger.info(
            "app_started",
            environment=settings.environment,
            event_processing=freshcart.config["event_processing"],
        )
        yield

    app = FastAPI(
        title="FreshCart API",
        description="Grocery e-commerce: catalogue, cart & checkout, delivery and notifications",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the domain context and bind a request id to every log line of the request."""
        clear_context()
        request_id = request.headers.get("x-request-id") or uuid4().hex[:12]
        add_context(request_id=request_id, method=request.method, path=request.url.path)
        with freshcart.domain_context():
            response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    api = APIRouter(prefix="/api")
    api.include_router(auth_router)
    api.include_router(admin_users_router)
    api.include_router(product_router)
    api.include_router(cart_router)
    api.include_router(order_router)
    api.include_router(driver_router)
    api.include_router(notification_router)
    api.include_router(analytics_router)
    app.include_router(api)

    # -----------------------------------------------------------------------
    # Health
    # -----------------------------------------------------------------------
    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "environment": settings.environment,
            "domain": freshcart.name,
            "eventProcessing": freshcart.config["event_processing"],
            "outbox": _outbox_status(),
        }

    return app
