"""SQLAlchemy models for stockpile_auth."""

from stockpile_auth.persistence.sqlalchemy.models.credential_model import (
    CredentialModel,
)

__all__ = [
    "CredentialModel",
]
