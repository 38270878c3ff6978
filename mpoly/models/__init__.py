"""Models package exports."""

from mpoly.models.auth import (
    CreateUserRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    TokenClaims,
    UpdateUserRequest,
)
from mpoly.models.record import Record, RecordView
from mpoly.models.response import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    RecordListResponse,
    RecordResponse,
    UserListResponse,
    UserResponse,
)
from mpoly.models.user import User, UserRole, UserStatus, UserSummary

__all__ = [
    "CreateUserRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "Record",
    "RecordListResponse",
    "RecordResponse",
    "RecordView",
    "TokenClaims",
    "UpdateUserRequest",
    "User",
    "UserListResponse",
    "UserResponse",
    "UserRole",
    "UserStatus",
    "UserSummary",
]
