"""SQLAlchemy implementation for stockpile_auth persistence.

Provides:
- AuthBase: Declarative base for auth models
- CredentialModel: SQLAlchemy model for credentials (``users`` table)
- CredentialRepositorySQLAlchemy: Repository implementation

Note: The consuming application should include AuthBase.metadata when
creating tables.
"""

from stockpile_auth.persistence.sqlalchemy.base import AuthBase
from stockpile_auth.persistence.sqlalchemy.models import CredentialModel
from stockpile_auth.persistence.sqlalchemy.repositories import (
    CredentialRepositorySQLAlchemy,
)

__all__ = [
    "AuthBase",
    "CredentialModel",
    "CredentialRepositorySQLAlchemy",
]
