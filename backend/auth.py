"""
Authentication module for session JWT validation.
Provides FastAPI dependencies for securing endpoints.

Session tokens are HS256 JWTs issued by the web application's login flow:
- sub: user ID
- role: "coach", "admin" or "client"
"""
import logging
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException

from backend.settings import Settings, get_settings
from core.constants import CLIENT_ROLE, MANAGING_ROLES
from models.enrollment import ActingUser

logger = logging.getLogger(__name__)


def validate_session_token(token: str, settings: Settings) -> ActingUser:
    """Validate a session JWT and return the acting user."""
    try:
        payload = jwt.decode(
            token,
            settings.session_jwt_secret,
            algorithms=[settings.session_jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session JWT: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing user ID")

    return ActingUser(user_id=str(user_id), role=payload.get("role") or CLIENT_ROLE)


async def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> ActingUser:
    """
    Authenticate via session JWT.
    Returns the ActingUser (user ID and role).

    Usage:
        @app.get("/protected")
        async def protected_route(user: ActingUser = Depends(get_current_user)):
            return {"user_id": user.user_id}
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = authorization.split(" ", 1)[1]
    return validate_session_token(token, settings)


async def require_coach(user: ActingUser = Depends(get_current_user)) -> ActingUser:
    """Restrict an endpoint to coaches and admins."""
    if user.role not in MANAGING_ROLES:
        raise HTTPException(status_code=403, detail="Access denied. Coaches only.")
    return user
