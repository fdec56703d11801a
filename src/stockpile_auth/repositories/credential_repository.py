"""Abstract repository interface for user credentials.

This interface defines the contract for credential persistence.
Implementations can use SQLAlchemy or any other storage.
"""

from abc import ABC, abstractmethod

from stockpile_auth.schemas import Credential


class CredentialRepository(ABC):
    """
    Abstract repository interface for authentication credentials.

    Implementations must enforce email uniqueness at the storage level
    (e.g. a unique index) and raise ``EmailTakenError`` when it is
    violated. Other storage faults are raised as ``StoreError``.

    Example implementation:
        class CredentialRepositorySQLAlchemy(CredentialRepository):
            def __init__(self, session: AsyncSession):
                self._session = session

            async def create(self, name, email, password_hash) -> Credential:
                # SQLAlchemy-specific implementation
                ...
    """

    @abstractmethod
    async def create(
        self,
        name: str | None,
        email: str,
        password_hash: str,
    ) -> Credential:
        """
        Persist a new credential.

        Parameters
        ----------
        name
            Display name (optional)
        email
            Login email, unique across credentials
        password_hash
            The bcrypt password hash

        Returns
        -------
        The stored credential with its assigned id and timestamps

        Raises
        ------
        EmailTakenError
            If the email is already registered
        """

    @abstractmethod
    async def find_by_email(self, email: str) -> Credential | None:
        """Find a credential by email, None if absent."""

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Credential | None:
        """Find a credential by id, None if absent."""

    @abstractmethod
    async def email_exists(self, email: str) -> bool:
        """Check whether an email is already registered."""
