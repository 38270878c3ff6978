"""User management service."""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from uuid import uuid4

import structlog

from mpoly.errors import Conflict, Forbidden, NotFound, ValidationError
from mpoly.models.auth import TokenClaims
from mpoly.models.user import (
    DEFAULT_DEPARTMENT,
    User,
    UserRole,
    UserStatus,
    UserSummary,
)
from mpoly.services.auth_service import AuthService
from mpoly.store import Collection, DocumentStore

logger = structlog.get_logger(__name__)

# Only these fields may be changed through update_user.
MUTABLE_FIELDS = frozenset({"name", "email", "role", "department", "status"})

REQUIRED_CREATE_FIELDS = ("userId", "password", "name", "email", "role")


def _parse_role(value: str) -> UserRole:
    try:
        return UserRole(value)
    except ValueError:
        allowed = ", ".join(r.value for r in UserRole)
        raise ValidationError(f"role must be one of: {allowed}.")


def _parse_status(value: str) -> UserStatus:
    try:
        return UserStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in UserStatus)
        raise ValidationError(f"status must be one of: {allowed}.")


def _find_index(users: list[dict[str, str]], user_id: str) -> Optional[int]:
    return next((i for i, u in enumerate(users) if u.get("id") == user_id), None)


class UserService:
    """Service for user CRUD operations over the Users collection."""

    def __init__(self, store: DocumentStore, auth_service: AuthService):
        self.store = store
        self.auth_service = auth_service

    async def list_users(self) -> list[UserSummary]:
        """Return all users in stored order, without password hashes."""
        users = await self.store.load(Collection.USERS)
        return [User.from_document(u).to_summary() for u in users]

    async def get_by_id(self, user_id: str, claims: TokenClaims) -> UserSummary:
        """Get one user.

        Administrators may fetch anyone; other callers only themselves.

        Raises:
            NotFound: If no user has this id
            Forbidden: If the caller is neither admin nor the user
        """
        users = await self.store.load(Collection.USERS)
        idx = _find_index(users, user_id)
        if idx is None:
            raise NotFound("User not found.")

        if not claims.is_admin and claims.id != user_id:
            raise Forbidden()

        return User.from_document(users[idx]).to_summary()

    async def create_user(
        self,
        user_id: Optional[str],
        password: Optional[str],
        name: Optional[str],
        email: Optional[str],
        role: Optional[str],
        department: Optional[str] = None,
    ) -> UserSummary:
        """Create a new user with a hashed password.

        Args:
            user_id: Unique login handle
            password: Plain-text password (will be hashed)
            name: Display name
            email: Contact email
            role: Admin or GeneralUser
            department: Defaults to "General"

        Returns:
            The created user, without password hash

        Raises:
            ValidationError: If a required field is missing or the role is unknown
            Conflict: If the login handle is taken
        """
        if not all((user_id, password, name, email, role)):
            raise ValidationError(
                f"{', '.join(REQUIRED_CREATE_FIELDS)} are required."
            )
        parsed_role = _parse_role(role)

        async with self.store.lock(Collection.USERS):
            users = await self.store.load(Collection.USERS)
            if any(u.get("userId") == user_id for u in users):
                raise Conflict("userId already exists.")

            existing_ids = {u.get("id") for u in users}
            new_id = str(uuid4())
            while new_id in existing_ids:
                new_id = str(uuid4())

            entity = {
                "id": new_id,
                "userId": user_id,
                "password": self.auth_service.hash_password(password),
                "name": name,
                "email": email,
                "role": parsed_role.value,
                "department": department or DEFAULT_DEPARTMENT,
                "status": UserStatus.ACTIVE.value,
                "createdAt": datetime.now(timezone.utc).isoformat(),
            }
            users.append(entity)
            await self.store.replace(Collection.USERS, users)

        logger.info(
            "user_created",
            user_id=new_id,
            login=user_id,
            role=parsed_role.value,
        )
        return User.from_document(entity).to_summary()

    async def update_user(self, user_id: str, changes: Mapping[str, Any]) -> UserSummary:
        """Apply allow-listed field changes to a user.

        Only name, email, role, department and status are copied from
        ``changes``; a non-empty ``password`` is re-hashed. Everything else,
        including ``id`` and ``userId``, is ignored.

        Raises:
            NotFound: If no user has this id
            ValidationError: If role or status has an unknown value
        """
        updates: dict[str, str] = {}
        for field in MUTABLE_FIELDS:
            value = changes.get(field)
            if value is None:
                continue
            if field == "role":
                value = _parse_role(value).value
            elif field == "status":
                value = _parse_status(value).value
            updates[field] = str(value)

        password = changes.get("password")

        async with self.store.lock(Collection.USERS):
            users = await self.store.load(Collection.USERS)
            idx = _find_index(users, user_id)
            if idx is None:
                raise NotFound("User not found.")

            users[idx].update(updates)
            if password:
                users[idx]["password"] = self.auth_service.hash_password(password)

            await self.store.replace(Collection.USERS, users)
            updated = users[idx]

        logger.info(
            "user_updated",
            user_id=user_id,
            fields=sorted(updates),
            credentials_rotated=bool(password),
        )
        return User.from_document(updated).to_summary()

    async def delete_user(self, user_id: str) -> None:
        """Remove a user.

        Raises:
            NotFound: If no user has this id; the collection is not rewritten
        """
        async with self.store.lock(Collection.USERS):
            users = await self.store.load(Collection.USERS)
            remaining = [u for u in users if u.get("id") != user_id]
            if len(remaining) == len(users):
                raise NotFound("User not found.")
            await self.store.replace(Collection.USERS, remaining)

        logger.info("user_deleted", user_id=user_id)
