"""
Common FastAPI dependencies for the Community Garden Hub.
Provides token extraction, the per-request gateway and the current member.
"""

import logging
from typing import Any, Dict, NamedTuple, Optional

from fastapi import Depends, WebSocket, WebSocketException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config.settings import get_settings
from ..config.supabase import get_supabase_manager
from ..infrastructure.database.gateway import SupabaseGateway
from ..utils.logging import bind_user
from .exceptions import AuthenticationError, GardenHubException
from .security import get_security_manager

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(auto_error=False)

PROFILE_COLUMNS = "id, email, username, role"


class CurrentUser:
    """Member information from the access token and the profiles table."""

    def __init__(
        self,
        user_id: str,
        email: Optional[str] = None,
        username: Optional[str] = None,
        role: str = "ruser",
        token_payload: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.email = email
        self.username = username
        self.role = role
        self.token_payload = token_payload or {}

    def is_privileged(self) -> bool:
        """Admins and moderators manage tasks, plots, events and rules."""
        return self.role in get_settings().privileged_roles


async def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """
    Extract the bearer access token.

    Raises:
        AuthenticationError: If no bearer token was sent
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing access token")
    return credentials.credentials


async def _build_gateway(access_token: str) -> SupabaseGateway:
    manager = get_supabase_manager()
    client = await manager.create_user_client(access_token)
    return SupabaseGateway(client, schema=get_settings().SUPABASE_SCHEMA)


async def get_gateway(access_token: str = Depends(get_access_token)) -> SupabaseGateway:
    """
    Gateway bound to the caller's access token so row-level security applies.
    """
    get_security_manager().verify_token(access_token)
    return await _build_gateway(access_token)


async def _load_user(payload: Dict[str, Any], gateway: SupabaseGateway) -> CurrentUser:
    user_id = payload["sub"]
    profile = await gateway.select_one("profiles", PROFILE_COLUMNS, id=user_id)
    if profile is None:
        logger.warning(f"Authenticated user has no profile row: {user_id}")
        raise AuthenticationError("User profile not found", user_id=user_id)

    bind_user(user_id)
    return CurrentUser(
        user_id=user_id,
        email=profile.get("email") or payload.get("email"),
        username=profile.get("username"),
        role=profile.get("role") or "ruser",
        token_payload=payload,
    )


async def get_current_user(
    access_token: str = Depends(get_access_token),
    gateway: SupabaseGateway = Depends(get_gateway),
) -> CurrentUser:
    """
    Get the authenticated member with the role from their profile row.

    Raises:
        AuthenticationError: If the token is invalid or the profile is missing
    """
    payload = get_security_manager().verify_token(access_token)
    current_user = await _load_user(payload, gateway)
    logger.debug(f"Current user retrieved: {current_user.user_id}")
    return current_user


class WebSocketSession(NamedTuple):
    user: CurrentUser
    gateway: SupabaseGateway


async def get_websocket_session(websocket: WebSocket) -> WebSocketSession:
    """
    Authenticate a WebSocket upgrade.

    Browsers cannot set headers on upgrades, so the token may also arrive
    as the ``token`` query parameter. Failures close the socket with 1008.
    """
    header = websocket.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        access_token = header[7:].strip()
    else:
        access_token = websocket.query_params.get("token", "")

    try:
        if not access_token:
            raise AuthenticationError("Missing access token")
        payload = get_security_manager().verify_token(access_token)
        gateway = await _build_gateway(access_token)
        user = await _load_user(payload, gateway)
    except GardenHubException as e:
        logger.warning(f"WebSocket authentication failed: {e.message}")
        raise WebSocketException(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)

    return WebSocketSession(user=user, gateway=gateway)
