"""
Authorization

One place answers "who is calling" and "may they use the back-office":
    - current_identity(gateway, token): verify a bearer token
    - is_admin(gateway, identity): an ``admin_users`` row exists for it

FastAPI dependencies build on those two and run once per request:
    - get_optional_identity: identity or None
    - get_current_identity: identity, else 401
    - require_admin: admin identity, else 401 / 403
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, WebSocket, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from foodzy.services.gateway import AuthUser, BaseDataGateway, GatewayError, get_gateway

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

WS_UNAUTHORIZED = 4401


async def current_identity(gateway: BaseDataGateway, token: Optional[str]) -> Optional[AuthUser]:
    """Return the identity behind ``token``, or None when it is missing or invalid."""
    if not token:
        return None
    try:
        return await gateway.get_user(token)
    except GatewayError as e:
        logger.error(f"Token verification failed: {e}")
        return None


async def is_admin(gateway: BaseDataGateway, identity: Optional[AuthUser]) -> bool:
    if identity is None:
        return False
    row = await gateway.select_one("admin_users", eq={"id": identity.id})
    return row is not None


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> Optional[AuthUser]:
    token = credentials.credentials if credentials else None
    return await current_identity(gateway, token)


async def get_current_identity(
    identity: Optional[AuthUser] = Depends(get_optional_identity),
) -> AuthUser:
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def require_admin(
    identity: AuthUser = Depends(get_current_identity),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> AuthUser:
    if not await is_admin(gateway, identity):
        logger.warning(f"Admin access denied for {identity.email}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return identity


async def websocket_identity(websocket: WebSocket, gateway: BaseDataGateway) -> Optional[AuthUser]:
    """
    Resolve the ``token`` query parameter of a WebSocket handshake.

    Closes the socket with code 4401 and returns None when the token is
    missing or invalid.
    """
    identity = await current_identity(gateway, websocket.query_params.get("token"))
    if identity is None:
        await websocket.close(code=WS_UNAUTHORIZED)
    return identity
