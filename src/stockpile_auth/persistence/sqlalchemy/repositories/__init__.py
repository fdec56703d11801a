"""SQLAlchemy repository implementations for stockpile_auth."""

from stockpile_auth.persistence.sqlalchemy.repositories.credential_repository import (
    CredentialRepositorySQLAlchemy,
)

__all__ = ["CredentialRepositorySQLAlchemy"]
