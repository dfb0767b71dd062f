"""
Mock Session Store

Issues mock JWT-shaped tokens and keeps token and user in a
SessionStorageBackend under the configured keys.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from finance_tracker.config import SessionSettings, get_settings
from finance_tracker.models.user import User
from finance_tracker.session.interface import SessionStorageBackend, SessionStoreInterface
from finance_tracker.session.storage import InMemorySessionStorage
from finance_tracker.session.tokens import decode_mock_token, generate_mock_token

logger = structlog.get_logger(__name__)


class MockSessionStore(SessionStoreInterface):
    """Session store for development and tests; no signature checks."""

    def __init__(
        self,
        storage: Optional[SessionStorageBackend] = None,
        settings: Optional[SessionSettings] = None,
    ):
        self._settings = settings or get_settings().session
        self._storage = storage if storage is not None else InMemorySessionStorage()

    @property
    def storage(self) -> SessionStorageBackend:
        return self._storage

    def issue(self, user: User) -> str:
        token = generate_mock_token()
        stored_user = user.model_copy(update={"token": token})
        self._storage.set_item(self._settings.token_key, token)
        self._storage.set_item(self._settings.user_key, stored_user.model_dump_json())
        logger.info("session_issued", user_id=user.id)
        return token

    def validate(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return token == self.current_token() and decode_mock_token(token) is not None

    def clear(self) -> None:
        self._storage.remove_item(self._settings.token_key)
        self._storage.remove_item(self._settings.user_key)
        logger.info("session_cleared")

    def current_token(self) -> Optional[str]:
        return self._storage.get_item(self._settings.token_key)

    def current_user(self) -> Optional[User]:
        raw = self._storage.get_item(self._settings.user_key)
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError:
            logger.warning("stored_user_invalid", key=self._settings.user_key)
            return None
