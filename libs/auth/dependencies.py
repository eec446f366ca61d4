from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.errors import ForbiddenError, UnauthorizedError

# auto_error=False so a missing header reaches our own 401 envelope.
security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> AuthUser:
    """Decode a bearer JWT into an AuthUser or raise UnauthorizedError."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            options={"verify_aud": False},
        )
        return AuthUser(**payload)
    except (JWTError, ValidationError):
        raise UnauthorizedError("Could not validate credentials")


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Validate the bearer token and return the authenticated caller.
    """
    if token is None:
        raise UnauthorizedError("Not authenticated")
    return decode_token(token.credentials)


async def require_coach(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """Allow coaches and admins (the service role counts as admin)."""
    if not current_user.is_coach:
        raise ForbiddenError("Coach or admin privileges required")
    return current_user


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    if not current_user.is_admin:
        raise ForbiddenError("Admin privileges required")
    return current_user


async def require_service_role(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """Internal endpoints are reserved for other services."""
    if current_user.role != "service_role":
        raise ForbiddenError("Service role required")
    return current_user
