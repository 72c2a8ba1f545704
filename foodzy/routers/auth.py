"""
Customer and Admin Sign-in

Registration creates the auth identity and its ``user_profiles`` row.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from foodzy.schemas import (
    ErrorResponse,
    IdentityResponse,
    LoginRequest,
    RegisterRequest,
    SessionResponse,
)
from foodzy.services.auth import get_current_identity, is_admin
from foodzy.services.gateway import AuthSession, AuthUser, BaseDataGateway, GatewayError, get_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid login credentials"
ADMIN_REQUIRED = "Access denied. Admin privileges required."


async def _identity(gateway: BaseDataGateway, user: AuthUser) -> IdentityResponse:
    return IdentityResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        phone=user.phone,
        is_admin=await is_admin(gateway, user),
    )


async def _session(gateway: BaseDataGateway, session: AuthSession) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        user=await _identity(gateway, session.user),
    )


@router.post(
    "/api/auth/register",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def register(
    data: RegisterRequest,
    gateway: BaseDataGateway = Depends(get_gateway),
) -> SessionResponse:
    """Create an account and sign it in."""
    if data.confirm_password is not None and data.password != data.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")

    try:
        user = await gateway.sign_up(data.email, data.password, data.full_name, data.phone)
    except GatewayError as e:
        raise HTTPException(status_code=400, detail=e.message)

    await gateway.insert("user_profiles", {
        "id": user.id,
        "full_name": data.full_name,
        "email": user.email,
        "phone": data.phone,
        "preferred_language": "en",
    })
    logger.info(f"Registered {user.email}")

    session = await gateway.sign_in(data.email, data.password)
    if session is None:
        raise HTTPException(status_code=400, detail=INVALID_CREDENTIALS)
    return await _session(gateway, session)


@router.post("/api/auth/login", response_model=SessionResponse, responses={400: {"model": ErrorResponse}})
async def login(
    data: LoginRequest,
    gateway: BaseDataGateway = Depends(get_gateway),
) -> SessionResponse:
    session = await gateway.sign_in(data.email, data.password)
    if session is None:
        raise HTTPException(status_code=400, detail=INVALID_CREDENTIALS)
    return await _session(gateway, session)


@router.get("/api/auth/me", response_model=IdentityResponse)
async def me(
    identity: AuthUser = Depends(get_current_identity),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> IdentityResponse:
    return await _identity(gateway, identity)


@router.post(
    "/api/admin/login",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    tags=["Admin"],
)
async def admin_login(
    data: LoginRequest,
    gateway: BaseDataGateway = Depends(get_gateway),
) -> SessionResponse:
    """Sign in, then refuse the session unless the identity is an admin."""
    session = await gateway.sign_in(data.email, data.password)
    if session is None:
        raise HTTPException(status_code=400, detail=INVALID_CREDENTIALS)

    response = await _session(gateway, session)
    if not response.user.is_admin:
        logger.warning(f"Admin login refused for {data.email}")
        raise HTTPException(status_code=403, detail=ADMIN_REQUIRED)
    return response
