"""Services package exports."""

from mpoly.services.auth_service import AuthService
from mpoly.services.logging_service import configure_logging, get_logger
from mpoly.services.record_service import RecordService
from mpoly.services.user_service import UserService

__all__ = [
    "AuthService",
    "RecordService",
    "UserService",
    "configure_logging",
    "get_logger",
]
