"""bcrypt password hashing.

Plaintext passwords only pass through ``hash`` and ``verify``; nothing in
this module keeps or logs them.
"""

import bcrypt

from stockpile_auth.exceptions import WeakPasswordError

_ENCODING = "utf-8"


class PasswordHashingService:
    """Salted one-way password hashes with a configurable bcrypt cost.

    Every digest embeds its own random salt and cost factor, so digests
    created with an older cost still verify after ``rounds`` changes.

    Examples
    --------
    >>> passwords = PasswordHashingService(rounds=4)
    >>> digest = passwords.hash("password123")
    >>> passwords.verify("password123", digest)
    True
    >>> passwords.verify("password124", digest)
    False
    """

    MIN_LENGTH = 8
    MAX_BYTES = 72  # bcrypt input limit

    def __init__(self, rounds: int = 12):
        """
        Parameters
        ----------
        rounds
            bcrypt cost (log2 of the key expansion rounds). Each step up
            doubles hashing time.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Return the bcrypt digest of ``password``.

        Raises
        ------
        WeakPasswordError
            If the password is too short or too long (see
            ``validate_strength``)
        """
        self.validate_strength(password)
        digest = bcrypt.hashpw(
            password.encode(_ENCODING),
            bcrypt.gensalt(rounds=self._rounds),
        )
        return digest.decode(_ENCODING)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check ``password`` against a stored digest in constant time.

        A digest that is not valid bcrypt never matches.
        """
        try:
            return bcrypt.checkpw(
                password.encode(_ENCODING),
                password_hash.encode(_ENCODING),
            )
        except (ValueError, TypeError):
            return False

    def validate_strength(self, password: str) -> None:
        """Reject passwords bcrypt cannot hash faithfully or that are too short.

        Raises
        ------
        WeakPasswordError
            If the password is empty, shorter than ``MIN_LENGTH`` characters,
            or longer than ``MAX_BYTES`` bytes in UTF-8
        """
        if not password:
            raise WeakPasswordError("Password cannot be empty")

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password.encode(_ENCODING)) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)
