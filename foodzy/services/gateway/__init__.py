"""
Data Gateway Factory

Returns the Local or Supabase gateway based on ENV_MODE.

Usage:
    from foodzy.services.gateway import create_gateway

    gateway = create_gateway()
    await gateway.initialize()

The application keeps one gateway on ``app.state.gateway`` for its whole
lifetime; routes receive it through the ``get_gateway`` dependency.
"""

import logging

from fastapi.requests import HTTPConnection

from foodzy.core.config import get_settings
from foodzy.services.gateway.base import (
    AuthSession,
    AuthUser,
    BaseDataGateway,
    ChangeEvent,
    Embed,
    GatewayError,
    Row,
    Subscription,
)
from foodzy.services.gateway.local import LocalDataGateway

logger = logging.getLogger(__name__)


def create_gateway() -> BaseDataGateway:
    """
    Build the gateway for the configured environment.

    Returns:
        LocalDataGateway in development, SupabaseDataGateway otherwise
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Data Gateway: Using LocalDataGateway (development mode)")
        return LocalDataGateway()

    from foodzy.services.gateway.supabase import SupabaseDataGateway

    logger.info(f"Data Gateway: Using SupabaseDataGateway ({settings.env_mode.value} mode)")
    return SupabaseDataGateway()


def get_gateway(connection: HTTPConnection) -> BaseDataGateway:
    """FastAPI dependency: the gateway owned by the running application."""
    return connection.app.state.gateway


__all__ = [
    "create_gateway",
    "get_gateway",
    "BaseDataGateway",
    "LocalDataGateway",
    "AuthSession",
    "AuthUser",
    "ChangeEvent",
    "Embed",
    "GatewayError",
    "Row",
    "Subscription",
]
