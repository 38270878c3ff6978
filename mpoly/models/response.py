"""Response envelopes. Every body carries ``success``."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from mpoly.models.record import Record, RecordView
from mpoly.models.user import UserRole, UserSummary


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    message: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    success: bool = True
    status: str = "ok"
    timestamp: datetime


class UserResponse(BaseModel):
    success: bool = True
    data: UserSummary


class UserListResponse(BaseModel):
    success: bool = True
    data: list[UserSummary]


class RecordResponse(BaseModel):
    success: bool = True
    data: Record


class RecordListResponse(BaseModel):
    """Records visible to the caller.

    Attributes:
        role: The caller's role, echoing how the list was scoped
        total: Number of records in ``data``
        data: Records enriched with ``ownerName``
    """

    success: bool = True
    role: UserRole
    total: int
    data: list[RecordView]
