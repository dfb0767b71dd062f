"""Tests for the session store, its storage backends and AuthService."""

import json

import pytest

from finance_tracker.models import AuditEventType, User
from finance_tracker.session import (
    AuthenticationError,
    AuthService,
    InMemorySessionStorage,
    JsonFileSessionStorage,
    MockSessionStore,
    SessionError,
    decode_mock_token,
    generate_mock_token,
)


@pytest.fixture
def storage():
    return InMemorySessionStorage()


@pytest.fixture
def session_store(storage, session_settings):
    return MockSessionStore(storage, settings=session_settings)


@pytest.fixture
def auth(session_store, session_settings, audit_logger):
    service = AuthService(session_store, settings=session_settings, audit_logger=audit_logger)
    yield service
    service.close()


class TestMockTokens:
    """Tests for mock JWT tokens."""

    def test_token_has_three_segments(self):
        token = generate_mock_token()
        assert token.count(".") == 2

    def test_decode_returns_payload(self):
        payload = decode_mock_token(generate_mock_token(subject="42", name="Sam"))
        assert payload["sub"] == "42"
        assert payload["name"] == "Sam"
        assert isinstance(payload["iat"], int)

    @pytest.mark.parametrize("token", ["", "abc", "a.b.c", "a.b"])
    def test_decode_rejects_garbage(self, token):
        assert decode_mock_token(token) is None


class TestMockSessionStore:
    """Tests for MockSessionStore."""

    def test_issue_persists_token_and_user(self, session_store, storage):
        user = User(id="1", email="sam@example.com", name="sam")
        token = session_store.issue(user)

        assert storage.get_item("auth_token") == token
        stored = json.loads(storage.get_item("user_data"))
        assert stored["email"] == "sam@example.com"
        assert stored["token"] == token
        assert session_store.current_user().token == token

    def test_validate(self, session_store):
        token = session_store.issue(User(id="1", email="a@b.c", name="a"))
        assert session_store.validate(token)
        assert not session_store.validate(generate_mock_token())
        assert not session_store.validate(None)

    def test_clear(self, session_store, storage):
        session_store.issue(User(id="1", email="a@b.c", name="a"))
        session_store.clear()
        assert session_store.current_token() is None
        assert session_store.current_user() is None
        assert len(storage) == 0

    def test_corrupt_user_blob_reads_as_none(self, session_store, storage):
        storage.set_item("user_data", "{not json")
        assert session_store.current_user() is None


class TestJsonFileSessionStorage:
    """Tests for the file backend."""

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "session.json"
        storage = JsonFileSessionStorage(path)
        storage.set_item("auth_token", "t")

        reopened = JsonFileSessionStorage(path)
        assert reopened.get_item("auth_token") == "t"
        reopened.remove_item("auth_token")
        assert JsonFileSessionStorage(path).get_item("auth_token") is None

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileSessionStorage(tmp_path / "absent.json").get_item("x") is None

    def test_write_failure_raises_session_error(self, tmp_path):
        storage = JsonFileSessionStorage(tmp_path / "no-such-dir" / "session.json", retry_attempts=2)
        with pytest.raises(SessionError):
            storage.set_item("auth_token", "t")


class TestAuthService:
    """Tests for login, registration and logout."""

    @pytest.mark.asyncio
    async def test_login(self, auth):
        response = await auth.login({"email": "sam@example.com", "password": "pw"})

        assert response.user.id == "1"
        assert response.user.name == "sam"
        assert response.token == auth.get_token()
        assert auth.is_authenticated()
        assert auth.current_user().email == "sam@example.com"

    @pytest.mark.asyncio
    async def test_login_requires_email_and_password(self, auth, audit_storage):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await auth.login({"email": "sam@example.com", "password": ""})

        assert not auth.is_authenticated()
        events = await audit_storage.get_recent_events(event_type=AuditEventType.LOGIN_FAILED)
        assert len(events) == 1

    @pytest.mark.asyncio
    async def test_register(self, auth):
        response = await auth.register({"name": "Sam Lee", "email": "sam@example.com", "password": "pw"})
        assert response.user.name == "Sam Lee"
        assert len(response.user.id) == 9

    @pytest.mark.asyncio
    async def test_register_requires_name(self, auth):
        with pytest.raises(AuthenticationError, match="Invalid registration data"):
            await auth.register({"email": "sam@example.com", "password": "pw"})

    @pytest.mark.asyncio
    async def test_logout(self, auth):
        await auth.login({"email": "sam@example.com", "password": "pw"})
        await auth.logout()

        assert auth.get_token() is None
        assert auth.current_user() is None
        assert not auth.is_authenticated()
        assert auth.authorization_headers() == {}

    @pytest.mark.asyncio
    async def test_authorization_headers(self, auth):
        response = await auth.login({"email": "sam@example.com", "password": "pw"})
        assert auth.authorization_headers() == {"Authorization": f"Bearer {response.token}"}

    @pytest.mark.asyncio
    async def test_session_restored_on_construction(self, auth, session_store, session_settings):
        await auth.login({"email": "sam@example.com", "password": "pw"})

        restored = AuthService(session_store, settings=session_settings)

        assert restored.is_authenticated()
        assert restored.current_user().email == "sam@example.com"
        restored.close()

    @pytest.mark.asyncio
    async def test_current_user_signal_pushes(self, auth):
        seen = []
        auth.current_user.subscribe(lambda user: seen.append(user.name if user else None))

        await auth.login({"email": "sam@example.com", "password": "pw"})
        await auth.logout()

        assert seen == ["sam", None]
