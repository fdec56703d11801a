"""SQLAlchemy implementation of CredentialRepository."""

import logging

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stockpile.domain.shared.time import ensure_tz_aware
from stockpile_auth.exceptions import EmailTakenError, StoreError
from stockpile_auth.persistence.sqlalchemy.models import CredentialModel
from stockpile_auth.repositories import CredentialRepository
from stockpile_auth.schemas import Credential

logger = logging.getLogger(__name__)


class CredentialRepositorySQLAlchemy(CredentialRepository):
    """
    SQLAlchemy implementation of CredentialRepository.

    The repository flushes but never commits or rolls back; the caller
    owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session.

        Parameters
        ----------
        session
            SQLAlchemy async session
        """
        self._session = session

    def _to_data(self, model: CredentialModel) -> Credential:
        """Map SQLAlchemy model to domain data transfer object."""
        return Credential(
            id=model.id,
            name=model.name,
            email=model.email,
            password_hash=model.password_hash,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    async def create(
        self,
        name: str | None,
        email: str,
        password_hash: str,
    ) -> Credential:
        model = CredentialModel(
            name=name,
            email=email,
            password_hash=password_hash,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            logger.info("Duplicate registration rejected by store: %s", email)
            raise EmailTakenError(email) from e
        except SQLAlchemyError as e:
            logger.exception("Failed to create credential for %s", email)
            raise StoreError("Failed to create user") from e

        logger.info("Created credential %s for %s", model.id, email)
        return self._to_data(model)

    async def find_by_email(self, email: str) -> Credential | None:
        stmt = select(CredentialModel).where(CredentialModel.email == email)
        model = await self._scalar_one_or_none(stmt, f"email={email}")
        return self._to_data(model) if model else None

    async def find_by_id(self, user_id: int) -> Credential | None:
        stmt = select(CredentialModel).where(CredentialModel.id == user_id)
        model = await self._scalar_one_or_none(stmt, f"id={user_id}")
        return self._to_data(model) if model else None

    async def email_exists(self, email: str) -> bool:
        stmt = select(exists().where(CredentialModel.email == email))
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to check email existence: %s", email)
            raise StoreError("Failed to check email existence") from e
        return bool(result.scalar())

    async def _scalar_one_or_none(self, stmt, lookup: str) -> CredentialModel | None:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to load credential (%s)", lookup)
            raise StoreError("Failed to get user") from e
        return result.scalar_one_or_none()
