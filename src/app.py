"""Storefront FastAPI application.

Serves checkout, order management and operator notification endpoints.
Services are built once per app and stored on ``app.state``; notifications
still in flight are drained on shutdown. Every request runs inside the
``ordering`` domain context, which must already be initialized (``main_app``
does it).

Usage:
    uvicorn app:main_app --factory --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError

from notifications.api import router as notifications_router
from ordering.api import discount_router, order_router
from ordering.domain import ordering
from shared.exceptions import NotificationDeliveryError, OrderNotFound, RepositoryError, TransitionError
from shared.logging import add_context, clear_context, configure_logging
from shared.services import Services, build_services

logger = structlog.get_logger(__name__)


def create_app(services: Services | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.services.background.drain()

    app = FastAPI(
        title="Storefront API",
        description="Checkout, order lifecycle and operator notifications",
        lifespan=lifespan,
    )
    app.state.services = services or build_services()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the ordering domain context for each request."""
        with ordering.domain_context():
            return await call_next(request)

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind a request id to every log event emitted while handling the request.

        Notification tasks scheduled by the handler inherit the binding.
        """
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        clear_context()
        add_context(request_id=request_id, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_context()
        response.headers["X-Request-ID"] = request_id
        return response

    # -----------------------------------------------------------------------
    # Error mapping
    # -----------------------------------------------------------------------
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"errors": exc.messages})

    @app.exception_handler(TransitionError)
    async def transition_error_handler(request: Request, exc: TransitionError):
        return JSONResponse(
            status_code=409,
            content={"error": str(exc), "current_status": exc.current, "requested_status": exc.target},
        )

    @app.exception_handler(OrderNotFound)
    async def not_found_handler(request: Request, exc: OrderNotFound):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(RepositoryError)
    async def repository_error_handler(request: Request, exc: RepositoryError):
        logger.error("Repository failure", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=503, content={"error": "Order storage is unavailable"})

    @app.exception_handler(NotificationDeliveryError)
    async def delivery_error_handler(request: Request, exc: NotificationDeliveryError):
        logger.warning("Bot API call failed", path=request.url.path, reason=exc.reason)
        return JSONResponse(status_code=502, content={"error": exc.reason})

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(order_router)
    app.include_router(discount_router)
    app.include_router(notifications_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def main_app() -> FastAPI:
    """Application factory for uvicorn: configures logging, initializes the domain, then builds the app."""
    configure_logging()
    ordering.init()
    return create_app()
