"""SQLAlchemy model for user credentials.

This model stores the user's email, display name and password hash.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from stockpile.domain.shared.time import utc_now
from stockpile_auth.persistence.sqlalchemy.base import AuthBase


class CredentialModel(AuthBase):
    """
    SQLAlchemy model for user credentials.

    Email uniqueness is enforced by a unique index, which also closes the
    race between two concurrent registrations for the same address.

    Table: users
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    email: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )

    # Password hash (bcrypt format, ~60 chars)
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<CredentialModel(id={self.id}, email={self.email})>"
