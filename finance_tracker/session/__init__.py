"""Session package: mock authentication behind pluggable interfaces."""

from finance_tracker.session.auth import AuthService
from finance_tracker.session.interface import (
    AuthenticationError,
    SessionError,
    SessionStorageBackend,
    SessionStoreInterface,
)
from finance_tracker.session.mock import MockSessionStore
from finance_tracker.session.storage import InMemorySessionStorage, JsonFileSessionStorage
from finance_tracker.session.tokens import decode_mock_token, generate_mock_token

__all__ = [
    # Services
    "AuthService",
    "MockSessionStore",
    # Interfaces
    "SessionStorageBackend",
    "SessionStoreInterface",
    # Storage
    "InMemorySessionStorage",
    "JsonFileSessionStorage",
    # Tokens
    "decode_mock_token",
    "generate_mock_token",
    # Errors
    "AuthenticationError",
    "SessionError",
]
