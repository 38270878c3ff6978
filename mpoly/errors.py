"""Domain error taxonomy.

Every error carries the HTTP status it maps to and a stable machine code.
The request boundary (see ``mpoly.api.exception_handlers``) turns them into
``{"success": false, "message": ...}`` bodies.
"""

from typing import Optional


class MpolyError(Exception):
    """Base class for all errors raised by the core."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Unexpected server error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MpolyError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid request."


class InvalidCredentials(MpolyError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials."


class AccountInactive(MpolyError):
    status_code = 403
    code = "ACCOUNT_INACTIVE"
    default_message = "Account is inactive. Contact administrator."


class TokenError(MpolyError):
    """Authorization failures; the client has to log in again."""

    status_code = 401
    code = "TOKEN_ERROR"
    default_message = "Invalid or expired token."


class TokenMissing(TokenError):
    code = "TOKEN_MISSING"
    default_message = "Authorisation token missing."


class TokenInvalid(TokenError):
    code = "TOKEN_INVALID"
    default_message = "Invalid token."


class TokenExpired(TokenError):
    code = "TOKEN_EXPIRED"
    default_message = "Token has expired."


class Forbidden(MpolyError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden."


class NotFound(MpolyError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found."


class Conflict(MpolyError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Resource already exists."


class StoreError(MpolyError):
    """Infrastructure failure of the document store.

    The message may contain file paths and is only ever logged; clients get
    ``public_message``.
    """

    status_code = 500
    code = "STORE_ERROR"
    public_message = "Internal server error."


class StoreUnavailable(StoreError):
    code = "STORE_UNAVAILABLE"
    default_message = "Data file is missing or unreadable."


class StoreCorrupt(StoreError):
    code = "STORE_CORRUPT"
    default_message = "Data file is malformed."
