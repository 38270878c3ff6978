"""User management API endpoints."""

from fastapi import APIRouter, Depends, status
import structlog

from mpoly.api.dependencies import get_current_claims, get_user_service, require_admin
from mpoly.models.auth import CreateUserRequest, TokenClaims, UpdateUserRequest
from mpoly.models.response import MessageResponse, UserListResponse, UserResponse
from mpoly.services.user_service import UserService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
async def list_users(
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserListResponse:
    """List all users (admin only), without password hashes."""
    users = await user_service.list_users()
    return UserListResponse(data=users)


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    claims: TokenClaims = Depends(get_current_claims),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Get one user (admin, or the user themself).

    Raises:
        Forbidden 403: If a non-admin asks for someone else
        NotFound 404: If the user does not exist
    """
    user = await user_service.get_by_id(user_id, claims)
    return UserResponse(data=user)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Create a new user (admin only).

    Raises:
        ValidationError 400: If a required field is missing
        Conflict 409: If the userId already exists
    """
    user = await user_service.create_user(
        user_id=request.user_id,
        password=request.password,
        name=request.name,
        email=request.email,
        role=request.role,
        department=request.department,
    )

    logger.info("admin_created_user", admin_id=admin.id, new_user_id=user.id)
    return UserResponse(data=user)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Update name, email, role, department, status or password (admin only).

    Raises:
        NotFound 404: If the user does not exist
    """
    updated = await user_service.update_user(
        user_id, request.model_dump(exclude_unset=True)
    )

    logger.info("admin_updated_user", admin_id=admin.id, target_user_id=user_id)
    return UserResponse(data=updated)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Delete a user (admin only).

    Raises:
        NotFound 404: If the user does not exist
    """
    await user_service.delete_user(user_id)

    logger.info("admin_deleted_user", admin_id=admin.id, deleted_user_id=user_id)
    return MessageResponse(message="User deleted.")
