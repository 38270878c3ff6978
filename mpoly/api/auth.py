"""Authentication API endpoints."""

from fastapi import APIRouter, Depends
import structlog

from mpoly.api.dependencies import get_auth_service, get_current_claims
from mpoly.models.auth import LoginRequest, LoginResponse, MeResponse, TokenClaims
from mpoly.services.auth_service import AuthService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Login with userId and password.

    Args:
        request: Login credentials

    Returns:
        LoginResponse with a signed token and the token's claims

    Raises:
        ValidationError 400: If userId or password is missing
        InvalidCredentials 401: If the user is unknown or the password is wrong
        AccountInactive 403: If the password is right but the account is inactive
    """
    token, claims = await auth_service.login(request.user_id, request.password)
    return LoginResponse(token=token, user=claims)


@router.get("/me")
async def get_me(claims: TokenClaims = Depends(get_current_claims)) -> MeResponse:
    """Return the claims of the current token.

    Logout is client-side: the token is simply discarded.
    """
    return MeResponse(user=claims)
