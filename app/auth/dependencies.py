# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and role gates.
#
# Tokens are HS256 access tokens issued by lib.security.TokenIssuer.
# Missing, malformed or expired tokens are rejected with 401; role checks
# that fail raise UnauthorizedError (403) through core.access.
#
# Usage:
#   from app.auth import CurrentUser
#
#   @router.get("/protected")
#   async def protected(user: CurrentUser):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.models import AuthUser
from app.dependencies import TokenIssuerDep
from core import access
from core.models.user import Role
from lib.security import TokenError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor (missing header handled below as 401)
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    tokens: TokenIssuerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    Extract and validate the user from the Bearer access token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        claims = tokens.decode_access(credentials.credentials)
    except TokenError as e:
        logger.warning(f"Access token rejected: {e.message}")
        raise _unauthorized(e.message)

    try:
        role = Role(claims.role)
    except ValueError:
        logger.warning(f"Unknown role in token: {claims.role}")
        raise _unauthorized("Invalid token: unknown role")

    logger.debug(f"Authenticated user: {claims.sub}")
    return AuthUser(id=claims.sub, email=claims.email, role=role)


async def get_current_user_optional(
    tokens: TokenIssuerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthUser]:
    """
    Optionally get the current user.

    Returns None if no token is provided or it is invalid, instead of
    raising an error. Used by public endpoints whose result depends on
    who is asking (e.g. owners see their own unpublished models).
    """
    if credentials is None:
        return None

    try:
        return await get_current_user(tokens, credentials)
    except HTTPException:
        return None


async def require_admin_user(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    access.require_admin(user)
    return user


async def require_super_admin_user(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    access.require_super_admin(user)
    return user


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
OptionalUser = Annotated[Optional[AuthUser], Depends(get_current_user_optional)]
AdminUser = Annotated[AuthUser, Depends(require_admin_user)]
SuperAdminUser = Annotated[AuthUser, Depends(require_super_admin_user)]
