from __future__ import annotations

import pytest

from core.common.errors import UnauthenticatedError
from core.models.user import UserRole
from usermanagement.logic.session_repository import digest_token
from usermanagement.tests.conftest import PASSWORD


def test_login_and_resolve(auth, admin):
    token = auth.login("admin@example.com", PASSWORD)
    user = auth.resolve(token)
    assert user.id == admin.id
    assert user.role is UserRole.ADMIN


def test_email_is_case_insensitive(auth, admin):
    assert auth.resolve(auth.login("  ADMIN@example.COM ", PASSWORD)).id == admin.id


def test_only_the_digest_is_stored(auth, db, admin):
    token = auth.login("admin@example.com", PASSWORD)
    stored = [r["token_hash"] for r in db.conn.execute("SELECT token_hash FROM sessions")]
    assert stored == [digest_token(token)]
    assert token not in stored


@pytest.mark.parametrize(
    "email, password",
    [("admin@example.com", "salah"), ("nobody@example.com", PASSWORD), ("", PASSWORD), ("admin@example.com", "")],
)
def test_bad_credentials(auth, admin, email, password):
    with pytest.raises(UnauthenticatedError):
        auth.login(email, password)


def test_inactive_account_cannot_login(auth, users, surveyor):
    users.update_fields(surveyor.id, {"active": False})
    with pytest.raises(UnauthenticatedError, match="tidak aktif"):
        auth.login("joko@example.com", PASSWORD)


def test_resolve_rejects_unknown_tokens(auth, admin):
    for token in (None, "", "not-a-token"):
        with pytest.raises(UnauthenticatedError):
            auth.resolve(token)


def test_session_expires(auth, sessions, clock, admin):
    token = auth.login("admin@example.com", PASSWORD)
    clock.advance(hours=7, minutes=59)
    assert auth.resolve(token).id == admin.id

    clock.advance(minutes=1)
    with pytest.raises(UnauthenticatedError, match="berakhir"):
        auth.resolve(token)
    assert sessions.get(token) is None


def test_logout_is_idempotent(auth, admin):
    token = auth.login("admin@example.com", PASSWORD)
    auth.logout(token)
    auth.logout(token)
    auth.logout("")
    with pytest.raises(UnauthenticatedError):
        auth.resolve(token)


def test_disabled_user_with_live_token(auth, users, surveyor):
    token = auth.login("joko@example.com", PASSWORD)
    users.update_fields(surveyor.id, {"active": False})
    with pytest.raises(UnauthenticatedError):
        auth.resolve(token)


def test_purge_expired(auth, sessions, clock, admin, surveyor):
    auth.login("admin@example.com", PASSWORD)
    clock.advance(hours=4)
    fresh = auth.login("joko@example.com", PASSWORD)
    clock.advance(hours=5)
    assert sessions.purge_expired(clock()) == 1
    assert auth.resolve(fresh).id == surveyor.id
