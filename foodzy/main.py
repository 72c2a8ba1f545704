"""
FastAPI Application Entry Point

FoodZy Restaurant Ordering - Hybrid Architecture
Supports both Local/Mock services (development) and hosted APIs (production).

Endpoints:
    - /api/auth/*: Customer registration and sign-in
    - /api/menu/*, /api/banners/*: Public catalog
    - /api/cart/*, /api/orders/*: Cart, checkout and order tracking
    - /api/chat/*: Chatbot and voice ordering
    - /api/i18n/*, /api/translate/*: Interface strings and translation
    - /api/admin/*: Back-office
    - /ws/*: Real-time order and banner feeds
    - GET /health: System health check
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from foodzy.core.config import get_settings, setup_logging
from foodzy.routers import admin, auth, banners, cart, chat, i18n, menu, orders, ws
from foodzy.schemas import HealthResponse
from foodzy.services.assistant import BaseChatModel, get_chat_model
from foodzy.services.email import BaseEmailService, get_email_service
from foodzy.services.gateway import BaseDataGateway, GatewayError, create_gateway, get_gateway
from foodzy.services.translation import BaseTranslationService, get_translation_service

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.

    A gateway already placed on ``app.state.gateway`` is used as is;
    otherwise one is built for the configured environment.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    gateway = getattr(app.state, "gateway", None)
    if gateway is None:
        gateway = create_gateway()
        app.state.gateway = gateway
    await gateway.initialize()
    logger.info(f"✅ Data Gateway: {gateway.provider_name}")

    # Log service configuration
    logger.info(f"✅ Email Service: {get_email_service().provider_name}")
    logger.info(f"✅ Chat Model: {get_chat_model().provider_name}")
    logger.info(f"✅ Translation Service: {get_translation_service().provider_name}")

    # Validate production config
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await get_chat_model().aclose()
    await get_translation_service().aclose()
    await gateway.close()
    app.state.gateway = None
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Restaurant ordering with a menu, cart, live order tracking, an ordering "
        "chatbot and a multilingual interface, plus the admin back-office."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (auth, menu, banners, cart, orders, chat, i18n, admin, ws):
    app.include_router(module.router)

# Local storage bucket objects
if settings.is_development:
    app.mount(
        "/media",
        StaticFiles(directory=settings.media_directory, check_dir=False),
        name="media",
    )


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍔 Welcome to {settings.restaurant_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    gateway: BaseDataGateway = Depends(get_gateway),
    email_service: BaseEmailService = Depends(get_email_service),
    chat_model: BaseChatModel = Depends(get_chat_model),
    translation_service: BaseTranslationService = Depends(get_translation_service),
) -> HealthResponse:
    """Verify all system components are operational."""
    gateway_status = "healthy" if await gateway.health_check() else "unhealthy"
    email_status = "healthy" if await email_service.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [gateway_status, email_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        gateway=f"{gateway.provider_name}: {gateway_status}",
        email_service=f"{email_service.provider_name}: {email_status}",
        chat_model=chat_model.provider_name,
        translation_service=translation_service.provider_name,
        timestamp=datetime.now(),
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(GatewayError)
async def gateway_exception_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Backend failures that no route turned into a user-facing message."""
    logger.error(f"Gateway error on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=502,
        content={
            "success": False,
            "error": "Bad Gateway",
            "detail": str(exc) if settings.debug else "The data service is unavailable",
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
