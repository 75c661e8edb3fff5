from __future__ import annotations

import pytest

from core.common.errors import ForbiddenError, NotFoundError, UnauthenticatedError, ValidationError
from core.models.user import UserRole
from usermanagement.tests.conftest import PASSWORD

NEW_USER = {"name": "Rina", "email": "rina@example.com", "password": "pw-rina", "role": "data_pemetaan"}


def test_admin_creates_user(manager, admin, auth):
    created = manager.create_user(admin, NEW_USER)
    assert created.role is UserRole.DATA_PEMETAAN
    assert created.email == "rina@example.com"
    assert created.password_hash and created.password_hash != "pw-rina"
    assert auth.resolve(auth.login("rina@example.com", "pw-rina")).id == created.id


def test_public_dict_hides_hash(manager, admin):
    data = manager.create_user(admin, NEW_USER).to_public_dict()
    assert "password_hash" not in data
    assert data["role"] == "DATA_PEMETAAN"


@pytest.mark.parametrize("op", ["list", "create", "update", "delete", "get"])
def test_non_admin_is_forbidden(manager, admin, surveyor, op):
    calls = {
        "list": lambda: manager.list_users(surveyor),
        "create": lambda: manager.create_user(surveyor, NEW_USER),
        "update": lambda: manager.update_user(surveyor, admin.id, {"name": "x"}),
        "delete": lambda: manager.delete_user(surveyor, admin.id),
        "get": lambda: manager.get_user(surveyor, admin.id),
    }
    with pytest.raises(ForbiddenError):
        calls[op]()


def test_create_validation(manager, admin):
    with pytest.raises(ValidationError) as exc:
        manager.create_user(admin, {"name": "X", "email": " "})
    assert set(exc.value.missing) == {"email", "password", "role"}

    with pytest.raises(ValidationError, match="Role tidak valid"):
        manager.create_user(admin, {**NEW_USER, "role": "SURVEYOR"})


def test_duplicate_email(manager, admin):
    manager.create_user(admin, NEW_USER)
    with pytest.raises(ValidationError, match="sudah terdaftar"):
        manager.create_user(admin, {**NEW_USER, "email": "RINA@example.com"})
    with pytest.raises(ValidationError, match="sudah terdaftar"):
        manager.update_user(admin, admin.id, {"email": "rina@example.com"})


def test_update_fields(manager, admin, surveyor, auth):
    updated = manager.update_user(
        admin, surveyor.id, {"name": "Joko W.", "role": "DATA_BERKAS", "password": "baru", "id": "hack"}
    )
    assert updated.id == surveyor.id
    assert updated.name == "Joko W."
    assert updated.role is UserRole.DATA_BERKAS
    assert auth.login("joko@example.com", "baru")
    with pytest.raises(UnauthenticatedError):
        auth.login("joko@example.com", PASSWORD)


def test_update_unknown_user(manager, admin):
    with pytest.raises(NotFoundError):
        manager.update_user(admin, "missing", {"name": "x"})


def test_disabling_revokes_sessions(manager, admin, surveyor, auth):
    token = auth.login("joko@example.com", PASSWORD)
    manager.update_user(admin, surveyor.id, {"active": False})
    with pytest.raises(UnauthenticatedError):
        auth.resolve(token)


def test_delete(manager, admin, surveyor, auth):
    token = auth.login("joko@example.com", PASSWORD)
    manager.delete_user(admin, surveyor.id)
    assert manager.get_user(admin, surveyor.id) is None
    with pytest.raises(UnauthenticatedError):
        auth.resolve(token)
    with pytest.raises(NotFoundError):
        manager.delete_user(admin, surveyor.id)


def test_admin_cannot_delete_self(manager, admin):
    with pytest.raises(ValidationError):
        manager.delete_user(admin, admin.id)
    assert [u.id for u in manager.list_users(admin)] == [admin.id]
