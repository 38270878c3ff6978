"""User models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from mpoly.errors import StoreCorrupt

DEFAULT_DEPARTMENT = "General"


class UserRole(str, Enum):
    """Roles governing record visibility and user management."""

    ADMIN = "Admin"
    GENERAL_USER = "GeneralUser"

    @classmethod
    def _missing_(cls, value: object) -> Optional["UserRole"]:
        # Older data files spell the role "General User".
        if isinstance(value, str) and value.replace(" ", "") == cls.GENERAL_USER.value:
            return cls.GENERAL_USER
        return None


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class UserSummary(BaseModel):
    """A user as it may leave the server: everything except the password hash."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    user_id: str
    name: str
    email: str
    role: UserRole
    department: str = DEFAULT_DEPARTMENT
    status: UserStatus = UserStatus.ACTIVE
    created_at: Optional[str] = None


class User(UserSummary):
    """A stored user, including the bcrypt hash of the password."""

    password: str

    @classmethod
    def from_document(cls, entity: dict[str, Any]) -> "User":
        """Build a User from a stored entity.

        Raises:
            StoreCorrupt: If the entity is missing fields or has bad values
        """
        try:
            return cls.model_validate(entity)
        except PydanticValidationError as e:
            raise StoreCorrupt(
                f"Invalid user entity {entity.get('id', '?')}: {e.error_count()} error(s)"
            ) from e

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def to_summary(self) -> UserSummary:
        return UserSummary.model_validate(self.model_dump(exclude={"password"}))
