"""FastAPI dependencies for authentication and authorization."""

from typing import Optional

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mpoly.errors import Forbidden, TokenMissing
from mpoly.models.auth import TokenClaims
from mpoly.services.auth_service import AuthService
from mpoly.services.record_service import RecordService
from mpoly.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_record_service(request: Request) -> RecordService:
    return request.app.state.record_service


async def get_current_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """Extract and validate the caller's claims from a Bearer token.

    The token is the only source of identity for the request; the Users
    collection is not consulted.

    Args:
        credentials: Bearer token from the Authorization header

    Returns:
        Claims embedded in the token, also stored on ``request.state.claims``

    Raises:
        TokenMissing: If there is no Bearer Authorization header
        TokenInvalid: If the token is malformed or badly signed
        TokenExpired: If the token has expired
    """
    if credentials is None or not credentials.credentials:
        raise TokenMissing()

    claims = auth_service.validate(credentials.credentials)

    request.state.claims = claims
    structlog.contextvars.bind_contextvars(user_id=claims.id)
    return claims


def is_admin(claims: TokenClaims) -> bool:
    return claims.is_admin


async def require_admin(
    claims: TokenClaims = Depends(get_current_claims),
) -> TokenClaims:
    """Require the caller to have the Admin role.

    Raises:
        Forbidden: If the caller is not an administrator
    """
    if not is_admin(claims):
        raise Forbidden("Admin access required.")
    return claims
