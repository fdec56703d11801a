"""Authentication services.

Provides password hashing and JWT token management.
"""

from stockpile_auth.services.password_service import PasswordHashingService
from stockpile_auth.services.token_service import TokenService

__all__ = [
    "PasswordHashingService",
    "TokenService",
]
