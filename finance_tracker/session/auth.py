"""
Authentication Service

Mock login / registration on top of a SessionStoreInterface.

Any non-empty email and password are accepted; registration also
needs a name. The signed-in user is exposed as a signal and is
restored from session storage when the service is constructed.
"""

import asyncio
import secrets
import string
from typing import Any, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.config import SessionSettings, get_settings
from finance_tracker.models.user import AuthResponse, LoginRequest, RegisterRequest, User
from finance_tracker.reactive import ReadonlySignal, Signal, effect
from finance_tracker.session.interface import AuthenticationError, SessionStoreInterface
from finance_tracker.session.mock import MockSessionStore

logger = structlog.get_logger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


class AuthService:
    """
    Login, registration and logout for the single local user.

    Usage:
        auth = AuthService(latency=0)
        await auth.login({"email": "ana@example.com", "password": "secret"})
        auth.authorization_headers()  # {"Authorization": "Bearer ..."}
    """

    def __init__(
        self,
        session_store: Optional[SessionStoreInterface] = None,
        *,
        settings: Optional[SessionSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        latency: Optional[float] = None,
    ):
        self._settings = settings or get_settings().session
        self._session = session_store or MockSessionStore(settings=self._settings)
        self._audit_logger = audit_logger
        self._latency = (
            self._settings.auth_latency_seconds if latency is None else latency
        )

        self._current_user: Signal[Optional[User]] = Signal(
            self._session.current_user(), name="auth.current_user"
        )
        self._is_authenticated: Signal[bool] = Signal(
            bool(self._session.current_token()), name="auth.is_authenticated"
        )
        self.current_user: ReadonlySignal[Optional[User]] = self._current_user.as_readonly()
        self.is_authenticated: ReadonlySignal[bool] = self._is_authenticated.as_readonly()

        self._stop_logging = effect(self._log_state, self._current_user)

    @property
    def session_store(self) -> SessionStoreInterface:
        return self._session

    async def login(self, credentials: Union[LoginRequest, Mapping[str, Any]]) -> AuthResponse:
        """
        Sign in.

        Raises:
            AuthenticationError: If email or password is missing
        """
        request = self._parse(LoginRequest, credentials, "Invalid credentials")
        await asyncio.sleep(self._latency)

        if not (request.email and request.password):
            await self._reject(request.email, "Invalid credentials")

        user = User(id="1", email=request.email, name=request.email.split("@")[0])
        response = self._start_session(user)
        if self._audit_logger is not None:
            await self._audit_logger.log_user_logged_in(user_id=user.id, email=user.email)
        return response

    async def register(self, data: Union[RegisterRequest, Mapping[str, Any]]) -> AuthResponse:
        """
        Create an account and sign in.

        Raises:
            AuthenticationError: If name, email or password is missing
        """
        request = self._parse(RegisterRequest, data, "Invalid registration data")
        await asyncio.sleep(self._latency)

        if not (request.email and request.password and request.name):
            await self._reject(request.email, "Invalid registration data")

        user_id = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
        user = User(id=user_id, email=request.email, name=request.name)
        response = self._start_session(user)
        if self._audit_logger is not None:
            await self._audit_logger.log_user_registered(user_id=user.id, email=user.email)
        return response

    async def logout(self) -> None:
        user = self._current_user()
        self._session.clear()
        self._current_user.set(None)
        self._is_authenticated.set(False)
        if self._audit_logger is not None:
            await self._audit_logger.log_user_logged_out(user_id=user.id if user else None)

    def get_token(self) -> Optional[str]:
        return self._session.current_token()

    def authorization_headers(self) -> dict[str, str]:
        """Bearer header for outgoing requests; empty when signed out."""
        token = self.get_token()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    def close(self) -> None:
        self._stop_logging()

    def _start_session(self, user: User) -> AuthResponse:
        token = self._session.issue(user)
        user = user.model_copy(update={"token": token})
        self._current_user.set(user)
        self._is_authenticated.set(True)
        return AuthResponse(user=user, token=token)

    async def _reject(self, email: str, reason: str) -> None:
        logger.warning("authentication_rejected", email=email, reason=reason)
        if self._audit_logger is not None:
            await self._audit_logger.log_login_failed(email=email, reason=reason)
        raise AuthenticationError(reason)

    @staticmethod
    def _parse(model, data, message: str):
        if isinstance(data, model):
            return data
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise AuthenticationError(message) from e

    def _log_state(self) -> None:
        user = self._current_user()
        logger.debug("auth_state_changed", signed_in=user is not None)
