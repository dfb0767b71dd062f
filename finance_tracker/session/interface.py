"""
Session Store Interface

DESIGN DECISION: Authentication sits behind two small interfaces.
This allows us to:
1. Replace the mock token issuer with a real backend later
2. Keep the token/user blob in memory for tests and in a file otherwise
3. Keep the finance core unaware of how sessions work

The core trusts whatever token the session store reports. Nothing
here verifies signatures.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_tracker.models.user import User


class SessionStorageBackend(ABC):
    """
    Key/value storage for the persisted session blob.

    Mirrors the small slice of browser localStorage the session needs.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string, or None if the key is absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a string under ``key``.

        Raises:
            SessionError: If the value could not be persisted
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove ``key``; removing an absent key is not an error."""
        pass


class SessionStoreInterface(ABC):
    """Issues, checks and clears the token of the single signed-in user."""

    @abstractmethod
    def issue(self, user: User) -> str:
        """
        Create a token for ``user`` and persist both.

        Returns:
            The issued token
        """
        pass

    @abstractmethod
    def validate(self, token: Optional[str]) -> bool:
        """True if ``token`` is the currently issued token."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Forget the current token and user."""
        pass

    @abstractmethod
    def current_token(self) -> Optional[str]:
        pass

    @abstractmethod
    def current_user(self) -> Optional[User]:
        pass


class SessionError(Exception):
    """Base exception for session operations."""
    pass


class AuthenticationError(SessionError):
    """Login or registration was rejected."""
    pass
