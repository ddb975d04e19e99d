"""Tests for the mock session lifecycle."""

import asyncio
import json

import pytest

from adapters.session_store import LocalStorage
from core.domain.errors import AuthError
from core.services.auth import AuthService, TokenRefresher, generate_mock_token, get_token_expiry

HOUR_MS = 3_600_000
MINUTE_MS = 60_000


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage(settings) -> LocalStorage:
    return LocalStorage(settings.session_path)


def make_auth(settings, storage, clock) -> AuthService:
    return AuthService(settings, storage=storage, clock=clock)


class TestToken:
    def test_expiry_roundtrip(self):
        token = generate_mock_token("luke", issued_at=1000, ttl_ms=HOUR_MS)
        assert token.count(".") == 2
        assert get_token_expiry(token) == 1000 + HOUR_MS

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "a.e30=.c"])
    def test_unparseable_token_expires_at_zero(self, token):
        assert get_token_expiry(token) == 0


class TestLogin:
    def test_valid_pair_persists_session(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        session = auth.login("luke", "skywalker")

        assert auth.is_authenticated
        assert session.username == "luke"
        assert session.issued_at == clock.now
        assert session.expires_at == clock.now + HOUR_MS

        stored = json.loads(storage.get_item("starwars_user"))
        assert stored["username"] == "luke"
        assert stored["token"] == session.token
        assert stored["issuedAt"] == clock.now
        assert stored["expiresAt"] == clock.now + HOUR_MS

    def test_session_survives_restart(self, settings, storage, clock):
        make_auth(settings, storage, clock).login("luke", "skywalker")
        restored = make_auth(settings, storage, clock)
        assert restored.is_authenticated
        assert restored.session is not None
        assert restored.session.username == "luke"

    @pytest.mark.parametrize(
        "username,password",
        [("luke", "wrong"), ("leia", "skywalker"), ("", ""), ("LUKE", "skywalker")],
    )
    def test_invalid_pair_raises_and_changes_nothing(self, settings, storage, clock, username, password):
        auth = make_auth(settings, storage, clock)
        with pytest.raises(AuthError):
            auth.login(username, password)
        assert not auth.is_authenticated
        assert storage.get_item("starwars_user") is None

    def test_invalid_pair_keeps_existing_session(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        session = auth.login("luke", "skywalker")
        with pytest.raises(AuthError):
            auth.login("luke", "nope")
        assert auth.session == session
        assert json.loads(storage.get_item("starwars_user"))["token"] == session.token

    def test_logout(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        auth.login("luke", "skywalker")
        auth.logout()
        assert not auth.is_authenticated
        assert storage.get_item("starwars_user") is None


class TestRestore:
    def test_corrupt_record_is_discarded(self, settings, storage, clock):
        storage.set_item("starwars_user", "{not json")
        storage.set_item("other", "kept")
        auth = make_auth(settings, storage, clock)
        assert not auth.is_authenticated
        assert storage.get_item("starwars_user") is None
        assert storage.get_item("other") == "kept"

    def test_expired_session_is_anonymous(self, settings, storage, clock):
        make_auth(settings, storage, clock).login("luke", "skywalker")
        clock.now += HOUR_MS + 1
        assert not make_auth(settings, storage, clock).is_authenticated

    def test_unreadable_storage_file(self, settings, storage, clock):
        settings.session_path.write_text("[1, 2", encoding="utf-8")
        assert not make_auth(settings, storage, clock).is_authenticated


class TestRefresh:
    def test_no_refresh_when_plenty_left(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        session = auth.login("luke", "skywalker")
        clock.now += 30 * MINUTE_MS
        assert auth.refresh_if_needed() is False
        assert auth.session == session

    def test_refresh_under_threshold(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        old = auth.login("luke", "skywalker")
        clock.now += HOUR_MS - 4 * MINUTE_MS
        assert auth.refresh_if_needed() is True
        assert auth.session is not None
        assert auth.session.token != old.token
        assert auth.session.expires_at == clock.now + HOUR_MS
        assert json.loads(storage.get_item("starwars_user"))["token"] == auth.session.token

    def test_refresh_has_no_limit(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        auth.login("luke", "skywalker")
        for _ in range(5):
            clock.now += HOUR_MS - MINUTE_MS
            assert auth.refresh_if_needed() is True

    def test_expired_token_is_not_refreshed(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        auth.login("luke", "skywalker")
        clock.now += HOUR_MS + 1
        assert auth.refresh_if_needed() is False

    def test_anonymous_never_refreshes(self, settings, storage, clock):
        assert make_auth(settings, storage, clock).refresh_if_needed() is False


class TestTokenRefresher:
    async def test_checks_immediately_and_on_interval(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        first = auth.login("luke", "skywalker")
        clock.now += HOUR_MS - MINUTE_MS

        refresher = TokenRefresher(auth, interval_seconds=0.01)
        refresher.start()
        await asyncio.sleep(0)
        assert auth.session is not None
        second = auth.session
        assert second.token != first.token

        clock.now += HOUR_MS - MINUTE_MS
        await asyncio.sleep(0.05)
        assert auth.session.token != second.token
        await refresher.stop()
        assert not refresher.running

    async def test_stops_when_logged_out(self, settings, storage, clock):
        auth = make_auth(settings, storage, clock)
        auth.login("luke", "skywalker")
        refresher = TokenRefresher(auth, interval_seconds=0.01)
        refresher.start()
        auth.logout()
        await asyncio.sleep(0.05)
        assert not refresher.running
        await refresher.stop()
