"""Fixtures for the case-file tests: a fresh database per test, a
controllable clock and one in-memory actor per role."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.models.user import User, UserRole
from berkaslifecycle.bootstrap import build_app


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_actor(role: UserRole, name: str | None = None, *, active: bool = True) -> User:
    return User(
        id=f"u-{role.value.lower()}",
        name=name or role.value.title().replace("_", " "),
        email=f"{role.value.lower()}@example.com",
        role=role,
        active=active,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app(tmp_path, clock):
    application = build_app(tmp_path / "berkas.db", clock=clock, sleep=lambda _s: None)
    yield application
    application.close()


@pytest.fixture
def actors() -> dict[UserRole, User]:
    return {role: make_actor(role) for role in UserRole}


@pytest.fixture
def admin(actors) -> User:
    return actors[UserRole.ADMIN]


@pytest.fixture
def qc(actors) -> User:
    return actors[UserRole.QUALITY_CONTROL]


COMPLETE_VALUES = {
    "no_berkas": "B-100",
    "nama_pemohon": "Budi",
    "jenis_permohonan": "Pemecahan",
    "status_tanah": "Milik",
    "koordinator_ukur": "Sutrisno",
    "petugas_ukur": "Joko",
    "petugas_pemetaan": "Rina",
}


@pytest.fixture
def berkas_at_kks(app, admin):
    """A file with every section complete, parked at KKS."""
    created = app.berkas.create({"no_berkas": "B-100", "nama_pemohon": "Budi",
                                 "jenis_permohonan": "Pemecahan"}, admin)
    return app.berkas.edit(created.id, COMPLETE_VALUES, admin)


@pytest.fixture
def complete_values() -> dict:
    return dict(COMPLETE_VALUES)
