"""Authentication exceptions.

These exceptions are raised by the stockpile_auth package and the
CredentialService, and are mapped to HTTP responses by the presentation
layer. Each exception carries a stable ``code`` for API clients.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # Registration / login
    EMAIL_TAKEN = "EMAIL_TAKEN"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"

    # Token validation
    INVALID_TOKEN = "INVALID_TOKEN"
    WRONG_TOKEN_TYPE = "WRONG_TOKEN_TYPE"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    MALFORMED_TOKEN = "MALFORMED_TOKEN"
    INVALID_CLAIMS = "INVALID_CLAIMS"

    # General
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthError(Exception):
    """Base exception for all authentication errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r})"
        )


class EmailTakenError(AuthError):
    """Raised when registering an email that already has a credential."""

    code = ErrorCode.EMAIL_TAKEN

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already registered")


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    code = ErrorCode.WEAK_PASSWORD

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login.

    Unknown email and wrong password both raise this exception with the
    same message, so callers cannot tell which emails are registered.
    """

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class UserNotFoundError(AuthError):
    """Raised when a credential lookup by id finds nothing."""

    code = ErrorCode.USER_NOT_FOUND

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("User not found")


class InvalidRefreshTokenError(AuthError):
    """Raised when a refresh token cannot be exchanged for a new session."""

    code = ErrorCode.INVALID_REFRESH_TOKEN

    def __init__(self, message: str = "Invalid refresh token"):
        super().__init__(message)


class InvalidTokenError(AuthError):
    """Raised when a JWT token is invalid, expired, or malformed.

    Base class for all token validation failures.
    """

    code = ErrorCode.INVALID_TOKEN

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class WrongTokenTypeError(InvalidTokenError):
    """Raised when an access token is used where a refresh token is required,
    or the other way around."""

    code = ErrorCode.WRONG_TOKEN_TYPE

    def __init__(self, message: str = "Wrong token type"):
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Raised when the token's ``exp`` claim lies in the past."""

    code = ErrorCode.TOKEN_EXPIRED

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class InvalidSignatureError(InvalidTokenError):
    """Raised when the signature does not verify or the signing algorithm
    is not the expected HMAC algorithm."""

    code = ErrorCode.INVALID_SIGNATURE

    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message)


class MalformedTokenError(InvalidTokenError):
    """Raised when the token cannot be parsed or lacks required claims."""

    code = ErrorCode.MALFORMED_TOKEN

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message)


class InvalidClaimsError(InvalidTokenError):
    """Raised when decoded claims do not have the expected shape."""

    code = ErrorCode.INVALID_CLAIMS

    def __init__(self, message: str = "Invalid token claims"):
        super().__init__(message)


class InternalError(AuthError):
    """Raised for hashing, signing and storage faults.

    The original exception is chained as ``__cause__``; the message is
    safe to show to clients.
    """

    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class StoreError(InternalError):
    """Raised by credential repositories on database faults."""

    def __init__(self, message: str = "Credential store error"):
        super().__init__(message)
