"""Authentication service for credential checks, JWT tokens and password hashing."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError
import structlog

from mpoly.config import Settings
from mpoly.errors import (
    AccountInactive,
    InvalidCredentials,
    TokenExpired,
    TokenInvalid,
    ValidationError,
)
from mpoly.models.auth import TokenClaims
from mpoly.models.user import User
from mpoly.store import Collection, DocumentStore

logger = structlog.get_logger(__name__)

# Constants
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 8
BCRYPT_ROUNDS = 10
# bcrypt only reads this many bytes; longer secrets are cut, as bcryptjs does.
BCRYPT_MAX_PASSWORD_BYTES = 72
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."
MISSING_CREDENTIALS_MESSAGE = "userId and password are required."


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


class AuthService:
    """Service for credential verification and token issuance/validation.

    The signing key and token lifetime come from the ``Settings`` passed in
    at startup and never change for the life of the instance.
    """

    def __init__(
        self,
        settings: Settings,
        store: DocumentStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm or JWT_ALGORITHM
        self.token_ttl = timedelta(hours=settings.token_ttl_hours)
        self._store = store
        self._clock = clock or utcnow
        self._dummy_hash: Optional[str] = None

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt.

        Only the first 72 UTF-8 bytes of the password are significant.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(_password_bytes(password), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches, False otherwise (including when
            the stored hash is not a valid bcrypt hash)
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(password),
                password_hash.encode("utf-8"),
            )
        except ValueError:
            return False

    def _burn_hash_check(self, password: str) -> None:
        """Spend one bcrypt check so unknown users cost as much as wrong passwords."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash_password("mpoly-dummy-password")
        self.verify_password(password, self._dummy_hash)

    async def authenticate(self, user_id: Optional[str], password: Optional[str]) -> TokenClaims:
        """Check credentials and return the claims for the matching user.

        Unknown users and wrong passwords fail identically. Inactivity is
        only disclosed once the password has been verified.

        Args:
            user_id: Login handle, matched exactly (case-sensitive)
            password: Plain-text password

        Returns:
            Claims for the authenticated user

        Raises:
            ValidationError: If either credential is missing or empty
            InvalidCredentials: If the user is unknown or the password is wrong
            AccountInactive: If the credentials are correct but the account is inactive
        """
        if not user_id or not password:
            raise ValidationError(MISSING_CREDENTIALS_MESSAGE)

        users = await self._store.load(Collection.USERS)
        entity = next((u for u in users if u.get("userId") == user_id), None)

        if entity is None:
            self._burn_hash_check(password)
            logger.info("login_failed", login=user_id, reason="unknown_user")
            raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

        if not self.verify_password(password, entity.get("password", "")):
            logger.info("login_failed", login=user_id, reason="bad_password")
            raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

        user = User.from_document(entity)
        if not user.is_active:
            logger.info("login_refused_inactive", login=user_id, user_id=user.id)
            raise AccountInactive()

        return TokenClaims.from_user(user)

    def stamp(self, claims: TokenClaims) -> TokenClaims:
        """Return ``claims`` with ``iat`` now and ``exp`` one TTL later.

        Timestamps are whole epoch seconds, which is all a JWT carries.
        """
        issued_at = int(self._clock().replace(microsecond=0).timestamp())
        return claims.model_copy(
            update={
                "iat": issued_at,
                "exp": issued_at + int(self.token_ttl.total_seconds()),
            }
        )

    def issue(self, claims: TokenClaims) -> str:
        """Create a signed JWT carrying ``claims``.

        Args:
            claims: Identity and role of the authenticated user

        Returns:
            Encoded JWT string with ``iat`` now and ``exp`` one TTL later
        """
        return self._encode(self.stamp(claims))

    def _encode(self, stamped: TokenClaims) -> str:
        token = jwt.encode(stamped.to_payload(), self._secret, algorithm=self._algorithm)
        logger.debug(
            "access_token_created",
            user_id=stamped.id,
            expires_hours=self.token_ttl.total_seconds() / 3600,
        )
        return token

    def validate(self, token: str) -> TokenClaims:
        """Decode and validate a JWT.

        Expiry is checked against this service's clock: a token is expired
        from the instant ``exp`` is reached.

        Args:
            token: Encoded JWT string

        Returns:
            The claims embedded at issuance, including ``iat`` and ``exp``

        Raises:
            TokenInvalid: If the signature, structure or claims are bad
            TokenExpired: If the token is at or past its expiry
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["exp", "iat"],
                },
            )
        except jwt.InvalidTokenError as e:
            logger.info("token_rejected", reason=type(e).__name__)
            raise TokenInvalid() from e

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise TokenInvalid()
        if self._clock().timestamp() >= exp:
            raise TokenExpired()

        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError as e:
            raise TokenInvalid() from e

    async def login(self, user_id: Optional[str], password: Optional[str]) -> tuple[str, TokenClaims]:
        """Authenticate and issue a token in one step.

        The returned claims carry the same ``iat`` and ``exp`` as the token.
        """
        claims = self.stamp(await self.authenticate(user_id, password))
        token = self._encode(claims)
        logger.info("user_logged_in", user_id=claims.id, login=claims.user_id)
        return token, claims
