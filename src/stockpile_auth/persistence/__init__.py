"""Persistence implementations for stockpile_auth.

Implementations are organized by technology:
- sqlalchemy/: SQLAlchemy async ORM (PostgreSQL, SQLite)

Import from the technology package directly:
    from stockpile_auth.persistence.sqlalchemy import CredentialRepositorySQLAlchemy
"""
