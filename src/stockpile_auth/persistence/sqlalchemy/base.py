"""SQLAlchemy declarative base for stockpile_auth models.

The consuming application should include AuthBase.metadata when creating
tables or configuring migrations.

Examples
--------
async with engine.begin() as conn:
    await conn.run_sync(AuthBase.metadata.create_all)
"""

from sqlalchemy.orm import DeclarativeBase


class AuthBase(DeclarativeBase):
    """Declarative base for stockpile_auth models."""
