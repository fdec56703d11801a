"""Application services."""

from stockpile.application.services.credential_service import CredentialService

__all__ = [
    "CredentialService",
]
