"""Auth request and response models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mpoly.models.user import User, UserRole


class TokenClaims(BaseModel):
    """Identity and role carried inside a signed token.

    Attributes:
        id: The user's system identifier
        user_id: The login handle
        name: Display name
        email: Contact email
        role: Admin or GeneralUser
        department: Department name
        iat: Issued-at, epoch seconds; set once the claims are signed
        exp: Expiry, epoch seconds; set once the claims are signed
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    user_id: str
    name: str
    email: str
    role: UserRole
    department: str
    iat: Optional[int] = None
    exp: Optional[int] = None

    @classmethod
    def from_user(cls, user: User) -> "TokenClaims":
        return cls(
            id=user.id,
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            department=user.department,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_payload(self) -> dict:
        """Claims as a JSON-ready mapping using wire names.

        Unset timestamps are left out.
        """
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class LoginRequest(BaseModel):
    """Login credentials.

    Both fields are optional at the schema level so that missing values
    produce the same 400 message as empty ones.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    """Successful authentication response.

    Attributes:
        token: Signed bearer token, valid for 8 hours
        user: The claims embedded in the token
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    token: str
    user: TokenClaims


class MeResponse(BaseModel):
    success: bool = True
    user: TokenClaims


class CreateUserRequest(BaseModel):
    """Admin request to create a new user.

    Required fields are checked by the service so that empty strings count
    as missing.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None


class UpdateUserRequest(BaseModel):
    """Partial update of a user.

    Unknown fields, including ``id`` and ``userId``, are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    status: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
