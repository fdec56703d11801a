"""Repository interfaces for auth persistence."""

from stockpile_auth.repositories.credential_repository import CredentialRepository

__all__ = [
    "CredentialRepository",
]
